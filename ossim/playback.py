# ossim/playback.py
# 功能：逻辑回放时钟。界面层用 QTimer 周期性调用 tick()，测试中可直接同步调用。

import logging
from typing import List, Optional, Tuple

from config import SYNC_EPILOGUE_CYCLES
from ossim.modules_core.module_2_sync_resources import SyncEngine
from ossim.process_model import ActionSnapshot, ScheduleResult, Segment

logger = logging.getLogger(__name__)


class SchedulePlayback:
    """逐周期展示一次已计算好的调度结果 (甘特图回放)。"""

    def __init__(self, result: ScheduleResult):
        self.result = result
        self.current_cycle = 0

    @property
    def finished(self) -> bool:
        return self.current_cycle >= self.result.makespan

    def tick(self) -> bool:
        """前进一个周期；已到达最后完成时间时返回 False。"""
        if self.finished:
            return False
        self.current_cycle += 1
        return True

    def reset(self):
        self.current_cycle = 0

    def visible_segments(self) -> List[Tuple[str, Segment]]:
        """截取到当前周期为止已经执行的片段。"""
        visible = []
        for pid, seg in self.result.timeline():
            if seg.start >= self.current_cycle:
                continue
            shown = min(seg.end, self.current_cycle) - seg.start
            visible.append((pid, Segment(seg.start, shown)))
        return visible


class SyncPlayback:
    """
    同步引擎的回放驱动：从周期 0 开始每次 tick() 推进一个周期，
    超过 最大请求周期 + 收尾窗口 后停止。
    """

    def __init__(self, engine: SyncEngine, epilogue: int = SYNC_EPILOGUE_CYCLES):
        self.engine = engine
        self.epilogue = epilogue
        self.history: List[List[ActionSnapshot]] = []
        self._next_cycle = 0

    @property
    def last_cycle(self) -> int:
        return self.engine.final_cycle(self.epilogue)

    @property
    def current_cycle(self) -> int:
        """最近一次处理的周期，尚未开始时为 -1。"""
        return self._next_cycle - 1

    @property
    def finished(self) -> bool:
        return self._next_cycle > self.last_cycle

    def tick(self) -> Optional[List[ActionSnapshot]]:
        if self.finished:
            return None
        snapshot = self.engine.advance(self._next_cycle)
        self.history.append(snapshot)
        self._next_cycle += 1
        if self.finished:
            logger.info("Synchronization playback finished at cycle %d", self.current_cycle)
        return snapshot

    def run(self) -> List[List[ActionSnapshot]]:
        """一次性推进到结束，返回每个周期的快照。"""
        while self.tick() is not None:
            pass
        return self.history

    def reset(self):
        self.engine.reset()
        self.history.clear()
        self._next_cycle = 0
