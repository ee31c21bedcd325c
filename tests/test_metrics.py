from schedsim.metrics import MetricAggregator, compute_system_metrics, summarize_process_metrics
from schedsim.models import ProcessMetrics, ScheduledSlice, ScheduleResult


def _row(pid, wait, turnaround, completion, response=None):
    return ProcessMetrics(
        pid=pid,
        arrival_time=completion - turnaround,
        burst_time=turnaround - wait,
        start_time=completion - turnaround + wait,
        completion_time=completion,
        waiting_time=wait,
        turnaround_time=turnaround,
        response_time=wait if response is None else response,
    )


def test_aggregator_averages_and_throughput():
    totals = MetricAggregator()
    totals.record(_row(1, wait=0, turnaround=5, completion=5))
    totals.record(_row(2, wait=5, turnaround=8, completion=8))
    totals.record(_row(3, wait=8, turnaround=10, completion=10))

    assert totals.count == 3
    assert totals.average_wait == 13 / 3
    assert totals.average_turnaround == 23 / 3
    assert totals.last_completion == 10
    assert totals.throughput == 0.3


def test_aggregator_last_completion_is_latest_not_last_recorded():
    totals = MetricAggregator().extend([_row(1, 2, 4, 9), _row(2, 0, 3, 3)])
    assert totals.last_completion == 9


def test_empty_aggregator_is_zero():
    totals = MetricAggregator()
    assert totals.average_wait == 0.0
    assert totals.throughput == 0.0


def test_compute_system_metrics_sets_result_system():
    result = ScheduleResult(
        algorithm="demo",
        quantum=None,
        processes=[_row(1, 0, 2, 2), _row(2, 0, 3, 6)],
        timeline=[ScheduledSlice(1, 0, 2), ScheduledSlice(2, 3, 6)],
    )
    system = compute_system_metrics(result)
    assert result.system is system
    assert system.process_count == 2
    assert system.cpu_busy_time == 5
    assert system.last_completion == 6
    assert system.cpu_utilization == 5 / 6


def test_summarize_process_metrics():
    summary = summarize_process_metrics([_row(1, 0, 4, 4, response=0), _row(2, 2, 6, 6, response=1)])
    assert summary == {"avg_waiting": 1.0, "avg_turnaround": 5.0, "avg_response": 0.5}
