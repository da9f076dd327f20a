# ossim/modules_core/module_1_cpu_scheduler.py
# 功能：CPU 调度引擎 (FIFO / SJF / SRT / RR / Priority) + 性能指标计算

import logging
from collections import deque
from typing import Callable, Dict, List, Optional, Sequence

from ossim.errors import DuplicateIdError, InvalidConfigurationError, NothingToScheduleError
from ossim.process_model import Algorithm, Metrics, Process, ScheduledProcess, ScheduleResult, Segment

logger = logging.getLogger(__name__)


def validate_selection(algorithm, quantum: Optional[int] = None) -> Algorithm:
    """
    校验算法选择：必须恰好是一个 Algorithm；RR 需要 >= 1 的时间片。
    也接受算法名称字符串。
    """
    if isinstance(algorithm, str):
        algorithm = Algorithm.parse(algorithm)
    if not isinstance(algorithm, Algorithm):
        raise InvalidConfigurationError(f"必须选择一个调度算法，收到: {algorithm!r}")
    if algorithm is Algorithm.RR:
        if quantum is None or isinstance(quantum, bool) or not isinstance(quantum, int) or quantum < 1:
            raise InvalidConfigurationError(f"RR 时间片必须是 >= 1 的整数，收到: {quantum!r}")
    return algorithm


def _check_unique_ids(processes: Sequence[Process]):
    seen = set()
    for p in processes:
        if p.pid in seen:
            raise DuplicateIdError(f"重复的进程 ID: {p.pid}")
        seen.add(p.pid)


def _arrival_order(processes: Sequence[Process]) -> List[Process]:
    # sorted() 是稳定排序：同一到达时间保持输入顺序
    return sorted(processes, key=lambda p: p.arrival_time)


# --- 各算法实现：输入进程列表，输出 {pid: ScheduledProcess} ---

def _schedule_fifo(processes: Sequence[Process]) -> Dict[str, ScheduledProcess]:
    results = {}
    clock = 0
    for p in sorted(processes, key=lambda p: (p.arrival_time, p.pid)):
        start = max(clock, p.arrival_time)
        results[p.pid] = ScheduledProcess(p, [Segment(start, p.burst_time)])
        clock = start + p.burst_time
    return results


def _schedule_non_preemptive(processes: Sequence[Process], key: Callable[[Process], int]) -> Dict[str, ScheduledProcess]:
    """
    SJF 与 Priority 共用的非抢占调度：
    就绪集合按加入顺序保存，min() 返回第一个最小值，
    因此平局时先加入就绪集合的进程 (更早到达 / 输入顺序靠前) 优先。
    """
    results = {}
    pending = deque(_arrival_order(processes))
    ready: List[Process] = []
    clock = 0

    while pending or ready:
        while pending and pending[0].arrival_time <= clock:
            ready.append(pending.popleft())

        if not ready:
            # CPU 空闲，时钟跳到下一个到达时间
            clock = pending[0].arrival_time
            continue

        chosen = min(ready, key=key)
        ready.remove(chosen)
        results[chosen.pid] = ScheduledProcess(chosen, [Segment(clock, chosen.burst_time)])
        clock += chosen.burst_time

    return results


def _schedule_srt(processes: Sequence[Process]) -> Dict[str, ScheduledProcess]:
    """最短剩余时间优先 (抢占式)，以 1 个周期为粒度推进。"""
    results = {p.pid: ScheduledProcess(p) for p in processes}
    remaining = {p.pid: p.burst_time for p in processes}
    pending = deque(_arrival_order(processes))
    ready: List[Process] = []
    last_pid = None
    cycle = 0

    while pending or ready:
        while pending and pending[0].arrival_time <= cycle:
            ready.append(pending.popleft())

        if not ready:
            cycle = pending[0].arrival_time
            last_pid = None
            continue

        current = min(ready, key=lambda p: remaining[p.pid])
        segments = results[current.pid].segments
        if last_pid == current.pid and segments and segments[-1].end == cycle:
            segments[-1] = segments[-1].extended()
        else:
            segments.append(Segment(cycle, 1))

        remaining[current.pid] -= 1
        if remaining[current.pid] == 0:
            ready.remove(current)
        last_pid = current.pid
        cycle += 1

    return results


def _schedule_rr(processes: Sequence[Process], quantum: int) -> Dict[str, ScheduledProcess]:
    """
    时间片轮转。每次分派运行 min(时间片, 剩余时间)。
    时间片结束时，所有到达时间 <= 当前时钟的新进程先入队，
    被抢占的进程随后才重新入队。
    """
    results = {p.pid: ScheduledProcess(p) for p in processes}
    remaining = {p.pid: p.burst_time for p in processes}
    pending = deque(_arrival_order(processes))
    ready_queue: deque = deque()
    clock = 0

    def admit_arrivals():
        while pending and pending[0].arrival_time <= clock:
            ready_queue.append(pending.popleft())

    admit_arrivals()
    while ready_queue or pending:
        if not ready_queue:
            clock = max(clock, pending[0].arrival_time)
            admit_arrivals()
            continue

        current = ready_queue.popleft()
        run = min(quantum, remaining[current.pid])
        results[current.pid].segments.append(Segment(clock, run))
        clock += run
        remaining[current.pid] -= run

        admit_arrivals()
        if remaining[current.pid] > 0:
            ready_queue.append(current)

    return results


def compute_metrics(scheduled: Sequence[ScheduledProcess]) -> Metrics:
    """根据最终结果计算平均等待、平均周转、吞吐量等指标。"""
    if not scheduled:
        return Metrics()

    count = len(scheduled)
    makespan = max(p.finish_time for p in scheduled)
    total_burst = sum(p.process.burst_time for p in scheduled)
    return Metrics(
        avg_waiting_time=sum(p.waiting_time for p in scheduled) / count,
        avg_turnaround_time=sum(p.turnaround_time for p in scheduled) / count,
        throughput=count / makespan if makespan > 0 else 0.0,
        avg_response_time=sum(p.response_time for p in scheduled) / count,
        cpu_utilization=total_burst / makespan if makespan > 0 else 0.0,
    )


def schedule(processes: Sequence[Process], algorithm, quantum: Optional[int] = None) -> ScheduleResult:
    """
    计算完整的调度结果。输入进程不会被修改，每次调用都返回新的 ScheduledProcess。

    :raises InvalidConfigurationError: 算法无效或 RR 时间片 < 1
    :raises NothingToScheduleError: 进程列表为空
    :raises DuplicateIdError: 进程 ID 重复
    """
    algorithm = validate_selection(algorithm, quantum)
    if not processes:
        raise NothingToScheduleError("没有可调度的进程")
    _check_unique_ids(processes)

    if algorithm is Algorithm.FIFO:
        by_pid = _schedule_fifo(processes)
    elif algorithm is Algorithm.SJF:
        by_pid = _schedule_non_preemptive(processes, key=lambda p: p.burst_time)
    elif algorithm is Algorithm.PRIORITY:
        by_pid = _schedule_non_preemptive(processes, key=lambda p: p.priority)
    elif algorithm is Algorithm.SRT:
        by_pid = _schedule_srt(processes)
    else:
        by_pid = _schedule_rr(processes, quantum)

    scheduled = [by_pid[p.pid] for p in processes]
    for sp in scheduled:
        sp.finalize()

    metrics = compute_metrics(scheduled)
    result = ScheduleResult(
        algorithm=algorithm,
        quantum=quantum if algorithm is Algorithm.RR else None,
        processes=scheduled,
        metrics=metrics,
    )
    logger.info("Scheduled %d processes with %s: makespan=%d avg_wait=%.2f",
                len(scheduled), algorithm.value, result.makespan, metrics.avg_waiting_time)
    return result
