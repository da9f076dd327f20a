# ossim/modules_core/module_2_sync_resources.py
# 功能：资源同步引擎 (互斥锁 / 计数信号量)，按周期推进资源占用状态

import logging
from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple

from config import RELEASE_DELAY_CYCLES, SYNC_EPILOGUE_CYCLES
from ossim.errors import CycleOrderError, DuplicateIdError
from ossim.process_model import Action, ActionSnapshot, ActionStatus, Resource, SyncMode

logger = logging.getLogger(__name__)

ActionKey = Tuple[str, str, int]


class SyncEngine:
    """
    资源同步引擎：
    由外部回放驱动每个周期调用一次 advance(cycle)，
    引擎先处理到期的释放，再按输入顺序仲裁本周期的请求。
    """

    def __init__(self, resources: Sequence[Resource] = (), actions: Sequence[Action] = (),
                 mode: SyncMode = SyncMode.MUTEX):
        self.resources: Dict[str, Resource] = {}
        self.actions: List[Action] = []
        self.mode = mode
        self.configure(resources, actions, mode)

    def configure(self, resources: Sequence[Resource], actions: Optional[Sequence[Action]] = None,
                  mode: Optional[SyncMode] = None):
        """
        替换资源 (以及可选的动作列表和模式)，并重置模拟状态。
        资源名或动作键 (pid, resource, cycle) 重复时抛出 DuplicateIdError，原配置保持不变。
        """
        table = {}
        for res in resources:
            if res.name in table:
                raise DuplicateIdError(f"重复的资源名: {res.name}")
            table[res.name] = res
        if actions is not None:
            actions = list(actions)
            seen_keys = set()
            for action in actions:
                if action.key in seen_keys:
                    raise DuplicateIdError(f"重复的动作: {action!r}")
                seen_keys.add(action.key)

        self.resources = table
        if actions is not None:
            self.actions = actions
        if mode is not None:
            self.mode = mode

        for action in self.unknown_actions():
            logger.warning("Action %r references undeclared resource %r; it will wait forever",
                           action, action.resource)
        self.reset()

    def reset(self):
        """可用计数恢复为资源容量，清空待释放队列和已完成集合，周期归零。"""
        self._availability: Dict[str, int] = {name: res.capacity for name, res in self.resources.items()}
        self._pending_releases: Dict[str, Deque[int]] = defaultdict(deque)
        self._done: Set[ActionKey] = set()
        self._granted_at: Dict[ActionKey, int] = {}
        self._last_snapshot: List[ActionSnapshot] = []
        self._last_advanced: Optional[int] = None
        self.current_cycle = 0

    # --- 查询 ---

    def lookup_resource(self, name: str) -> Optional[Resource]:
        """显式查找资源，未声明的资源返回 None，由调用方决定如何处理。"""
        return self.resources.get(name)

    def availability(self, name: str) -> Optional[int]:
        return self._availability.get(name)

    def held_count(self, name: str) -> int:
        """当前周期正在占用该资源的动作数。"""
        return sum(1 for key, cycle in self._granted_at.items()
                   if key[1] == name and cycle <= self.current_cycle < cycle + RELEASE_DELAY_CYCLES)

    def unknown_actions(self) -> List[Action]:
        return [a for a in self.actions if a.resource not in self.resources]

    def is_done(self, action: Action) -> bool:
        return action.key in self._done

    def final_cycle(self, epilogue: int = SYNC_EPILOGUE_CYCLES) -> int:
        """回放驱动应推进到的最后一个周期 (最大请求周期 + 收尾窗口)。"""
        if not self.actions:
            return epilogue
        return max(a.cycle for a in self.actions) + epilogue

    # --- 推进 ---

    def _eligible(self, resource: Resource) -> bool:
        available = self._availability[resource.name]
        if self.mode is SyncMode.MUTEX:
            return available == resource.capacity
        return available > 0

    def advance(self, cycle: int) -> List[ActionSnapshot]:
        """
        处理一个周期并返回该周期的动作状态快照。

        周期必须从 0 开始连续递增；对刚处理过的周期重复调用会直接返回
        上一次的快照，不会重复授予或释放。
        """
        if self._last_advanced is not None and cycle == self._last_advanced:
            return list(self._last_snapshot)
        expected = 0 if self._last_advanced is None else self._last_advanced + 1
        if cycle != expected:
            raise CycleOrderError(f"advance() 期望周期 {expected}，收到 {cycle}")

        self.current_cycle = cycle

        # 1. 释放阶段：归还本周期到期的资源
        for name, releases in self._pending_releases.items():
            while releases and releases[0] <= cycle:
                releases.popleft()
                self._availability[name] += 1

        # 2. 仲裁阶段：按固定输入顺序处理已到请求周期且尚未完成的动作
        granted_now: Set[ActionKey] = set()
        for action in self.actions:
            if action.cycle > cycle or action.key in self._done:
                continue
            resource = self.lookup_resource(action.resource)
            if resource is None:
                continue
            if self._eligible(resource):
                self._availability[resource.name] -= 1
                self._done.add(action.key)
                self._granted_at[action.key] = cycle
                self._pending_releases[resource.name].append(cycle + RELEASE_DELAY_CYCLES)
                granted_now.add(action.key)
                logger.debug("cycle %d: granted %r (available=%d)",
                             cycle, action, self._availability[resource.name])

        snapshot = []
        for action in self.actions:
            if action.cycle > cycle:
                continue
            if action.key in granted_now:
                status = ActionStatus.ACCESSED
            elif action.key in self._done:
                status = ActionStatus.DONE
            else:
                status = ActionStatus.WAITING
            snapshot.append(ActionSnapshot(action, status))

        self._last_advanced = cycle
        self._last_snapshot = snapshot
        return list(snapshot)
