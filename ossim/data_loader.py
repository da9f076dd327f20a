# ossim/data_loader.py
# 功能：从文本文件加载进程、资源和动作记录 (逗号分隔，一行一条)

import logging
from typing import Callable, List, Sequence, TypeVar

from config import INPUT_ENCODING
from ossim.errors import LoadError
from ossim.process_model import Action, ActionKind, Process, Resource

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _split(line: str, expected: int, layout: str) -> List[str]:
    fields = [f.strip() for f in line.split(",")]
    if len(fields) != expected:
        raise LoadError(f"期望 {expected} 个字段 ({layout})，实际 {len(fields)} 个")
    if any(not f for f in fields):
        raise LoadError(f"存在空字段 ({layout})")
    return fields


def _to_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise LoadError(f"{name} 不是整数: {value!r}") from None


def parse_process_line(line: str) -> Process:
    """解析 `pid, burstTime, arrivalTime, priority`。"""
    pid, burst, arrival, priority = _split(line, 4, "pid, burst, arrival, priority")
    try:
        return Process(pid, _to_int(burst, "burstTime"), _to_int(arrival, "arrivalTime"),
                       _to_int(priority, "priority"))
    except ValueError as e:
        raise LoadError(str(e)) from e


def parse_resource_line(line: str) -> Resource:
    """解析 `name, counter`。"""
    name, counter = _split(line, 2, "name, counter")
    try:
        return Resource(name, _to_int(counter, "counter"))
    except ValueError as e:
        raise LoadError(str(e)) from e


def parse_action_line(line: str) -> Action:
    """
    解析 `pid, action, resource, cycle`，action 为 READ 或 WRITE (不区分大小写)。

    输入格式中 action 原本是自由文本；这里只接受 READ / WRITE，
    其他取值按格式错误处理 (LoadError)，而不是原样保留。
    """
    pid, kind, resource, cycle = _split(line, 4, "pid, action, resource, cycle")
    try:
        action_kind = ActionKind(kind.upper())
    except ValueError:
        raise LoadError(f"未知的动作类型: {kind!r} (应为 READ 或 WRITE)") from None
    cycle_value = _to_int(cycle, "cycle")
    if cycle_value < 0:
        raise LoadError(f"cycle 必须是非负整数: {cycle_value}")
    return Action(pid, action_kind, resource, cycle_value)


def parse_lines(lines: Sequence[str], parser: Callable[[str], T], path=None) -> List[T]:
    """
    逐行解析，跳过空行和 # 注释。
    任何一行出错都会抛出 LoadError，不返回部分结果。
    """
    records = []
    for line_no, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            records.append(parser(line))
        except LoadError as e:
            raise LoadError(str(e), path=path, line_no=line_no) from e
    return records


def _read_lines(path) -> List[str]:
    try:
        with open(path, encoding=INPUT_ENCODING) as f:
            return f.readlines()
    except OSError as e:
        raise LoadError(f"无法读取文件: {e}", path=path) from e


def load_processes(path) -> List[Process]:
    processes = parse_lines(_read_lines(path), parse_process_line, path)
    seen = set()
    for p in processes:
        if p.pid in seen:
            raise LoadError(f"重复的进程 ID: {p.pid}", path=path)
        seen.add(p.pid)
    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def load_resources(path) -> List[Resource]:
    resources = parse_lines(_read_lines(path), parse_resource_line, path)
    seen = set()
    for r in resources:
        if r.name in seen:
            raise LoadError(f"重复的资源名: {r.name}", path=path)
        seen.add(r.name)
    logger.info("Loaded %d resources from %s", len(resources), path)
    return resources


def load_actions(path) -> List[Action]:
    actions = parse_lines(_read_lines(path), parse_action_line, path)
    seen = set()
    for a in actions:
        if a.key in seen:
            raise LoadError(f"重复的动作: {a.pid}, {a.resource}, {a.cycle}", path=path)
        seen.add(a.key)
    logger.info("Loaded %d actions from %s", len(actions), path)
    return actions
