import pytest

from ossim.errors import DuplicateIdError, InvalidConfigurationError, NothingToScheduleError
from ossim.modules_core.module_1_cpu_scheduler import compute_metrics, schedule, validate_selection
from ossim.process_model import Algorithm, Metrics, Process, Segment


def _procs():
    return [
        Process("P1", burst_time=4, arrival_time=0),
        Process("P2", burst_time=2, arrival_time=1),
        Process("P3", burst_time=1, arrival_time=2),
    ]


def _mixed():
    return [
        Process("P1", 5, 0, 3),
        Process("P2", 3, 1, 1),
        Process("P3", 8, 2, 4),
        Process("P4", 2, 3, 2),
        Process("P5", 4, 10, 1),
        Process("P6", 1, 30, 5),
    ]


def _spans(result, pid):
    return [(s.start, s.end) for s in result.get(pid).segments]


def test_fifo_example():
    res = schedule(_procs(), Algorithm.FIFO)
    assert _spans(res, "P1") == [(0, 4)]
    assert _spans(res, "P2") == [(4, 6)]
    assert _spans(res, "P3") == [(6, 7)]
    assert [res.get(pid).waiting_time for pid in ("P1", "P2", "P3")] == [0, 3, 5]
    assert res.metrics.avg_waiting_time == pytest.approx(8 / 3)
    assert res.metrics.avg_turnaround_time == pytest.approx(14 / 3)
    assert res.metrics.throughput == pytest.approx(3 / 7)


def test_fifo_orders_by_arrival_then_id():
    res = schedule([Process("B", 2, 0), Process("A", 3, 0)], Algorithm.FIFO)
    assert _spans(res, "A") == [(0, 3)]
    assert _spans(res, "B") == [(3, 5)]
    # result keeps the input order
    assert [p.pid for p in res.processes] == ["B", "A"]


def test_fifo_waits_for_late_arrival():
    res = schedule([Process("P1", 2, 0), Process("P2", 1, 5)], Algorithm.FIFO)
    assert _spans(res, "P2") == [(5, 6)]
    assert res.get("P2").waiting_time == 0


def test_sjf_example():
    res = schedule(_procs(), Algorithm.SJF)
    assert _spans(res, "P1") == [(0, 4)]
    assert _spans(res, "P3") == [(4, 5)]
    assert _spans(res, "P2") == [(5, 7)]
    assert [res.get(pid).waiting_time for pid in ("P1", "P2", "P3")] == [0, 4, 2]
    assert res.metrics.avg_waiting_time == pytest.approx(2.0)


def test_sjf_tie_keeps_insertion_order():
    res = schedule([Process("A", 3, 0), Process("B", 2, 0), Process("C", 2, 0)], Algorithm.SJF)
    assert _spans(res, "B") == [(0, 2)]
    assert _spans(res, "C") == [(2, 4)]
    assert _spans(res, "A") == [(4, 7)]


def test_sjf_idle_jumps_to_next_arrival():
    res = schedule([Process("P1", 1, 3), Process("P2", 2, 0)], Algorithm.SJF)
    assert _spans(res, "P2") == [(0, 2)]
    assert _spans(res, "P1") == [(3, 4)]


def test_srt_preempts_for_shorter_remaining():
    res = schedule(_procs(), Algorithm.SRT)
    assert _spans(res, "P1") == [(0, 1), (4, 7)]
    assert _spans(res, "P2") == [(1, 3)]
    assert _spans(res, "P3") == [(3, 4)]
    assert [res.get(pid).waiting_time for pid in ("P1", "P2", "P3")] == [3, 0, 1]


def test_srt_tie_keeps_running_earlier_arrival():
    res = schedule([Process("A", 3, 0), Process("B", 2, 1)], Algorithm.SRT)
    # at cycle 1 both have 2 cycles left
    assert _spans(res, "A") == [(0, 3)]
    assert _spans(res, "B") == [(3, 5)]


def test_srt_tie_with_equal_arrivals_uses_input_order():
    res = schedule([Process("B", 2, 0), Process("A", 2, 0)], Algorithm.SRT)
    assert _spans(res, "B") == [(0, 2)]
    assert _spans(res, "A") == [(2, 4)]


def test_srt_merges_contiguous_cycles():
    res = schedule([Process("P1", 5, 0)], Algorithm.SRT)
    assert res.get("P1").segments == [Segment(0, 5)]
    assert res.get("P1").finish_time == 5


def test_rr_fresh_arrivals_enqueued_before_preempted():
    res = schedule(_procs(), Algorithm.RR, quantum=2)
    assert _spans(res, "P1") == [(0, 2), (5, 7)]
    assert _spans(res, "P2") == [(2, 4)]
    assert _spans(res, "P3") == [(4, 5)]
    assert [res.get(pid).waiting_time for pid in ("P1", "P2", "P3")] == [3, 1, 2]
    assert res.quantum == 2


def test_rr_idle_gap_and_short_final_slice():
    res = schedule([Process("P1", 1, 0), Process("P2", 3, 4)], Algorithm.RR, quantum=2)
    assert _spans(res, "P1") == [(0, 1)]
    assert _spans(res, "P2") == [(4, 6), (6, 7)]


def test_rr_segments_never_exceed_quantum():
    res = schedule(_mixed(), Algorithm.RR, quantum=3)
    for sp in res.processes:
        assert all(seg.duration <= 3 for seg in sp.segments)


def test_priority_lower_value_runs_first():
    procs = [Process("P1", 4, 0, 3), Process("P2", 2, 1, 2), Process("P3", 1, 2, 1)]
    res = schedule(procs, Algorithm.PRIORITY)
    assert _spans(res, "P1") == [(0, 4)]
    assert _spans(res, "P3") == [(4, 5)]
    assert _spans(res, "P2") == [(5, 7)]


def test_priority_tie_prefers_earlier_arrival():
    procs = [Process("late", 1, 2, 1), Process("early", 1, 1, 1), Process("first", 2, 0, 9)]
    res = schedule(procs, Algorithm.PRIORITY)
    assert _spans(res, "first") == [(0, 2)]
    assert _spans(res, "early") == [(2, 3)]
    assert _spans(res, "late") == [(3, 4)]


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_schedule_invariants(algorithm):
    procs = _mixed()
    res = schedule(procs, algorithm, quantum=2)
    all_segments = []
    for p, sp in zip(procs, res.processes):
        assert sp.process is p
        assert sp.executed_time == p.burst_time
        assert sp.waiting_time == sp.finish_time - p.arrival_time - p.burst_time
        assert sp.waiting_time >= 0
        assert sp.start_time >= p.arrival_time
        for before, after in zip(sp.segments, sp.segments[1:]):
            assert before.end <= after.start
        all_segments.extend(sp.segments)

    # single CPU: no two segments overlap
    all_segments.sort(key=lambda s: s.start)
    for before, after in zip(all_segments, all_segments[1:]):
        assert before.end <= after.start


def test_each_run_returns_fresh_results():
    procs = _procs()
    first = schedule(procs, Algorithm.FIFO)
    second = schedule(procs, Algorithm.RR, quantum=1)
    assert first.get("P1") is not second.get("P1")
    assert _spans(first, "P1") == [(0, 4)]


def test_empty_process_list():
    with pytest.raises(NothingToScheduleError):
        schedule([], Algorithm.FIFO)


@pytest.mark.parametrize("quantum", [0, -1, None])
def test_rr_rejects_invalid_quantum(quantum):
    with pytest.raises(InvalidConfigurationError):
        schedule(_procs(), Algorithm.RR, quantum=quantum)


def test_invalid_quantum_checked_before_empty_list():
    with pytest.raises(InvalidConfigurationError):
        schedule([], Algorithm.RR, quantum=0)


def test_duplicate_ids_fail_fast():
    with pytest.raises(DuplicateIdError):
        schedule([Process("P1", 1, 0), Process("P1", 2, 0)], Algorithm.FIFO)


def test_validate_selection_accepts_names():
    assert validate_selection("priority") is Algorithm.PRIORITY
    assert validate_selection("rr", 4) is Algorithm.RR
    with pytest.raises(InvalidConfigurationError):
        validate_selection("lottery")
    with pytest.raises(InvalidConfigurationError):
        validate_selection(None)


def test_compute_metrics_defaults_when_empty():
    assert compute_metrics([]) == Metrics()


def test_extra_metrics():
    res = schedule([Process("P1", 2, 0), Process("P2", 2, 4)], Algorithm.FIFO)
    # busy 4 of 6 cycles
    assert res.metrics.cpu_utilization == pytest.approx(4 / 6)
    assert res.metrics.avg_response_time == pytest.approx(0.0)
    assert res.makespan == 6


def test_timeline_sorted_by_start():
    res = schedule(_procs(), Algorithm.RR, quantum=2)
    assert [(pid, seg.start) for pid, seg in res.timeline()] == [("P1", 0), ("P2", 2), ("P3", 4), ("P1", 5)]


def test_process_validation():
    with pytest.raises(ValueError):
        Process("P1", 0, 0)
    with pytest.raises(ValueError):
        Process("P1", 1, -1)
    with pytest.raises(ValueError):
        Process("", 1, 0)
