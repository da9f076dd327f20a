# ossim/system_status.py
# 全局会话状态管理

from threading import RLock
from typing import List, Optional

from config import DEFAULT_ALGORITHM, DEFAULT_QUANTUM
from ossim.modules_core.module_1_cpu_scheduler import schedule
from ossim.modules_core.module_2_sync_resources import SyncEngine
from ossim.playback import SchedulePlayback, SyncPlayback
from ossim.process_model import Action, Algorithm, Metrics, Process, Resource, ScheduleResult, SyncMode


class SystemStatus:
    """
    全局会话状态单例：保存最近一次成功加载的输入数据和调度结果，
    界面层的各个组件通过它共享数据。
    """
    _instance = None
    _lock = RLock()

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            with cls._lock:
                if not cls._instance:
                    cls._instance = super(SystemStatus, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        # 调度模块输入与结果
        self.processes: List[Process] = []
        self.algorithm: Algorithm = Algorithm.parse(DEFAULT_ALGORITHM)
        self.quantum: int = DEFAULT_QUANTUM
        self.schedule_result: Optional[ScheduleResult] = None
        self.schedule_playback: Optional[SchedulePlayback] = None

        # 同步模块输入与引擎
        self.resources: List[Resource] = []
        self.actions: List[Action] = []
        self.sync_mode: SyncMode = SyncMode.MUTEX
        self.sync_engine = SyncEngine()
        self.sync_playback = SyncPlayback(self.sync_engine)

        self._initialized = True

    @property
    def metrics(self) -> Metrics:
        """没有调度结果时返回默认 (全 0) 指标。"""
        if self.schedule_result is None:
            return Metrics()
        return self.schedule_result.metrics

    # --- 调度 ---

    def set_processes(self, processes: List[Process]):
        """替换进程集合 (只在加载完全成功后调用)，旧的调度结果失效。"""
        self.processes = list(processes)
        self.schedule_result = None
        self.schedule_playback = None

    def run_schedule(self, algorithm: Optional[Algorithm] = None, quantum: Optional[int] = None) -> ScheduleResult:
        algorithm = self.algorithm if algorithm is None else algorithm
        quantum = self.quantum if quantum is None else quantum
        # 失败时保留上一次的算法、时间片和结果
        result = schedule(self.processes, algorithm, quantum)
        self.algorithm = result.algorithm
        self.quantum = quantum
        self.schedule_result = result
        self.schedule_playback = SchedulePlayback(result)
        return result

    # --- 同步 ---

    # 先让引擎校验并接受新配置，成功后再更新会话中的列表

    def set_resources(self, resources: List[Resource]):
        resources = list(resources)
        self._reconfigure_sync(resources, self.actions, self.sync_mode)
        self.resources = resources

    def set_actions(self, actions: List[Action]):
        actions = list(actions)
        self._reconfigure_sync(self.resources, actions, self.sync_mode)
        self.actions = actions

    def set_sync_mode(self, mode: SyncMode):
        self._reconfigure_sync(self.resources, self.actions, mode)
        self.sync_mode = mode

    def _reconfigure_sync(self, resources, actions, mode):
        self.sync_engine.configure(resources, actions, mode)
        self.sync_playback.reset()

    def reset_history(self):
        """清除回放进度，保留已加载的数据"""
        with self._lock:
            if self.schedule_playback is not None:
                self.schedule_playback.reset()
            self.sync_playback.reset()


# 创建并导出全局状态实例
STATUS = SystemStatus()
