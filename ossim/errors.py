# ossim/errors.py
# 模拟器异常定义


class SimulatorError(Exception):
    """所有模拟器异常的基类，界面层统一捕获并弹窗提示。"""


class LoadError(SimulatorError):
    """输入文件格式错误。加载是全有或全无的，失败时不会返回部分数据。"""

    def __init__(self, message, path=None, line_no=None):
        self.path = path
        self.line_no = line_no
        location = ""
        if path is not None:
            location = f"{path}"
            if line_no is not None:
                location += f":{line_no}"
            location += ": "
        super().__init__(f"{location}{message}")


class NothingToScheduleError(SimulatorError):
    """进程列表为空，没有可调度的内容。"""


class InvalidConfigurationError(SimulatorError, ValueError):
    """算法选择或时间片配置无效。"""


class DuplicateIdError(SimulatorError, ValueError):
    """同一输入集合中出现重复的进程 ID 或资源名。"""


class CycleOrderError(SimulatorError, ValueError):
    """advance() 的周期参数不连续或倒退。"""
