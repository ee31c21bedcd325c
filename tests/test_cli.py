from pathlib import Path

import pytest

from schedsim.cli import build_parser, main


@pytest.fixture
def workload(tmp_path: Path) -> Path:
    p = tmp_path / "procs.csv"
    p.write_text("1,5,0,2\n2,9,1,1\n3,6,2,3\n")
    return p


def test_all_renders_every_algorithm(workload, capsys):
    assert main(["--plain", "all", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    for title in ("First-come, first-serve", "Shortest-job-first", "Priority", "Round-robin"):
        assert title in out
    assert out.count("Gantt schedule") == 4
    assert "Throughput" in out


def test_run_single_algorithm(workload, capsys):
    assert main(["--plain", "run", "-a", "rr", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Round-robin" in out
    assert "Quantum: 2" in out


def test_run_rich_output(workload, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(workload)]) == 0
    assert "Gantt Chart" in capsys.readouterr().out


def test_compare(workload, capsys):
    assert main(["compare", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    for label in ("First-come, first-serve", "Shortest-job-first", "Priority", "Round-robin (q=2)"):
        assert label in out


def test_compare_subset(workload, capsys):
    assert main(["compare", "-w", str(workload), "-a", "fcfs", "sjf"]) == 0
    out = capsys.readouterr().out
    assert "Shortest-job-first" in out
    assert "Round-robin" not in out


def test_missing_workload_is_reported(capsys):
    assert main(["all"]) == 1
    assert "must give a scheduling file" in capsys.readouterr().err


def test_malformed_workload_is_reported(tmp_path: Path, capsys):
    p = tmp_path / "bad.csv"
    p.write_text("1,five,0\n")
    assert main(["all", "-w", str(p)]) == 1
    assert "Invalid process entry" in capsys.readouterr().err


def test_unreadable_workload_is_reported(tmp_path: Path, capsys):
    assert main(["all", "-w", str(tmp_path / "nope.csv")]) == 1
    assert "Error" in capsys.readouterr().err


def test_unknown_algorithm_is_reported(workload, capsys):
    assert main(["run", "-a", "lottery", "-w", str(workload)]) == 1
    assert "Unknown algorithm" in capsys.readouterr().err


def test_parser_defaults():
    args = build_parser().parse_args(["all", "-w", "x.csv"])
    assert args.quantum == 2
    assert args.plain is False


def test_non_utf8_workload_is_reported(tmp_path: Path, capsys):
    p = tmp_path / "binary.csv"
    p.write_bytes(b"1,5,0\n2,\xff\xfe,1\n")
    assert main(["all", "-w", str(p)]) == 1
    assert "not valid UTF-8" in capsys.readouterr().err
