from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, run_algorithm, run_all
from .errors import InvalidArgs, SchedulerError
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import Process, ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, RR) over a fixed batch of processes.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch decision.",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Render Gantt charts as plain text instead of colored panels.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    all_parser = subparsers.add_parser("all", help="Run every algorithm on a workload file, one after another.")
    all_parser.add_argument(
        "--workload",
        "-w",
        help="Path to CSV (id,burst,arrival[,priority]) or JSON workload file.",
    )
    all_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )

    run_parser = subparsers.add_parser("run", help="Run a single scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        help="Path to CSV (id,burst,arrival[,priority]) or JSON workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the others).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        help="Path to CSV or JSON workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help=f"Algorithms to compare (default: {' '.join(ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(workload: Optional[str]) -> List[Process]:
    if not workload:
        raise InvalidArgs("must give a scheduling file to process (use --workload)")
    return load_workload(workload)


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.rule(f"[bold]{escape(result.algorithm)}[/bold]")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        console.print(build_rich_gantt(result.timeline))

    console.print()

    system = result.system
    show_response = result.quantum is not None

    headers = ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"]
    footers = [
        "",
        "",
        "",
        "",
        f"Average\n{system.avg_waiting:.2f}",
        f"Average\n{system.avg_turnaround:.2f}",
        f"Throughput\n{system.throughput:.2f}/t",
    ]
    if show_response:
        headers.append("Response")
        footers.append(f"Average\n{system.avg_response:.2f}")

    table = Table(title="Schedule table", box=box.SIMPLE_HEAVY, show_footer=True, pad_edge=False)
    for header, footer in zip(headers, footers):
        justify = "center" if header in {"ID", "Priority"} else "right"
        table.add_column(header, footer=footer, justify=justify)

    for p in sorted(result.processes, key=lambda row: row.pid):
        row = [
            str(p.pid),
            str(p.priority),
            str(p.burst_time),
            str(p.arrival_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        ]
        if show_response:
            row.append(str(p.response_time))
        table.add_row(*row)

    console.print(table)
    console.print()


def _comparison_label(result: ScheduleResult) -> str:
    if result.quantum is None:
        return result.algorithm
    return f"{result.algorithm} (q={result.quantum})"


def _print_comparison(results: List[ScheduleResult], console: Console) -> None:
    labels = [_comparison_label(result) for result in results]

    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY, pad_edge=False)
    summary_table.add_column("Algorithm", no_wrap=True, min_width=max(len(label) for label in labels))
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for label, result in zip(labels, results):
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            label,
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            f"{result.system.throughput:.3f}",
        )

    console.print(summary_table)



def _dispatch(args: argparse.Namespace, console: Console) -> int:
    processes = _load(args.workload)

    if args.command == "all":
        for result in run_all(processes, quantum=args.quantum):
            _print_result(result, console, plain=args.plain)
        return 0

    if args.command == "run":
        result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
        _print_result(result, console, plain=args.plain)
        return 0

    if args.command == "compare":
        results = [run_algorithm(alg, processes, quantum=args.quantum) for alg in args.algorithms]
        _print_comparison(results, console)
        return 0

    raise InvalidArgs(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    console = Console()
    err_console = Console(stderr=True)

    try:
        return _dispatch(args, console)
    except (SchedulerError, OSError) as exc:
        logger.debug("run aborted", exc_info=True)
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
