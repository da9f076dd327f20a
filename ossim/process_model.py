# ossim/process_model.py
#数据模型定义

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ossim.errors import InvalidConfigurationError


class Algorithm(Enum):
    """CPU 调度算法选择器 (一次只能选择一个)。"""
    FIFO = "FIFO"
    SJF = "SJF"
    SRT = "SRT"
    RR = "RR"
    PRIORITY = "Priority"

    @property
    def preemptive(self) -> bool:
        return self in (Algorithm.SRT, Algorithm.RR)

    @classmethod
    def parse(cls, text: str) -> "Algorithm":
        """按名称 (不区分大小写) 解析算法，例如 'rr'、'Priority'。"""
        key = text.strip().upper()
        for algo in cls:
            if algo.name == key or algo.value.upper() == key:
                return algo
        raise InvalidConfigurationError(f"未知的调度算法: {text!r}")


# 资源访问动作类型
class ActionKind(Enum):
    READ = "READ"
    WRITE = "WRITE"


# 动作在某一周期的仲裁状态，用于时间线的可视化
class ActionStatus(Enum):
    WAITING = "等待"
    ACCESSED = "访问"
    DONE = "完成"


# 资源同步模式
class SyncMode(Enum):
    MUTEX = "互斥锁"      # 只有资源完全空闲时才授予
    SEMAPHORE = "信号量"  # 只要还有剩余计数就授予


@dataclass(frozen=True)
class Process:
    """
    输入进程记录 (不可变)。调度结果保存在 ScheduledProcess 中，
    每次调度都会生成新的副本，不会修改这里的字段。
    """
    pid: str
    burst_time: int
    arrival_time: int = 0
    priority: int = 0  # 数值越小优先级越高

    def __post_init__(self):
        if not self.pid:
            raise ValueError("pid must be a non-empty string")
        if self.burst_time <= 0:
            raise ValueError(f"Process {self.pid}: burst_time must be positive. Got: {self.burst_time}")
        if self.arrival_time < 0:
            raise ValueError(f"Process {self.pid}: arrival_time must be non-negative. Got: {self.arrival_time}")


@dataclass(frozen=True)
class Segment:
    start: int
    duration: int

    @property
    def end(self) -> int:
        return self.start + self.duration

    def extended(self, cycles: int = 1) -> "Segment":
        return Segment(self.start, self.duration + cycles)


@dataclass
class ScheduledProcess:
    """一次调度运行中某个进程的执行片段和统计结果。"""
    process: Process
    segments: List[Segment] = field(default_factory=list)
    start_time: int = -1
    finish_time: int = -1
    waiting_time: int = 0

    @property
    def pid(self) -> str:
        return self.process.pid

    @property
    def turnaround_time(self) -> int:
        return self.finish_time - self.process.arrival_time

    @property
    def response_time(self) -> int:
        # 从到达到首次运行的时间
        return self.start_time - self.process.arrival_time

    @property
    def executed_time(self) -> int:
        return sum(seg.duration for seg in self.segments)

    def finalize(self):
        """根据片段计算开始、完成和等待时间。"""
        self.start_time = self.segments[0].start
        self.finish_time = self.segments[-1].end
        self.waiting_time = self.finish_time - self.process.arrival_time - self.process.burst_time

    def __repr__(self):
        spans = ", ".join(f"[{s.start},{s.end})" for s in self.segments)
        return f"ScheduledProcess(PID={self.pid}, Segments={spans}, Wait={self.waiting_time})"


@dataclass(frozen=True)
class Metrics:
    avg_waiting_time: float = 0.0
    avg_turnaround_time: float = 0.0
    throughput: float = 0.0
    avg_response_time: float = 0.0
    cpu_utilization: float = 0.0


@dataclass
class ScheduleResult:
    algorithm: Algorithm
    quantum: Optional[int]
    processes: List[ScheduledProcess]  # 与输入顺序一致
    metrics: Metrics = field(default_factory=Metrics)

    @property
    def makespan(self) -> int:
        return max((p.finish_time for p in self.processes), default=0)

    def get(self, pid: str) -> ScheduledProcess:
        for p in self.processes:
            if p.pid == pid:
                return p
        raise KeyError(pid)

    def timeline(self) -> List[Tuple[str, Segment]]:
        """按开始时间排列的所有执行片段 (甘特图使用)。"""
        entries = [(p.pid, seg) for p in self.processes for seg in p.segments]
        entries.sort(key=lambda item: item[1].start)
        return entries


@dataclass(frozen=True)
class Resource:
    name: str
    capacity: int  # 1 = 互斥锁, N = 信号量

    def __post_init__(self):
        if not self.name:
            raise ValueError("resource name must be a non-empty string")
        if self.capacity < 1:
            raise ValueError(f"Resource {self.name}: capacity must be >= 1. Got: {self.capacity}")


@dataclass(frozen=True)
class Action:
    pid: str
    kind: ActionKind
    resource: str
    cycle: int  # 请求周期

    @property
    def key(self) -> Tuple[str, str, int]:
        return (self.pid, self.resource, self.cycle)

    def __repr__(self):
        return f"Action({self.pid} {self.kind.value} {self.resource} @ {self.cycle})"


@dataclass(frozen=True)
class ActionSnapshot:
    action: Action
    status: ActionStatus
