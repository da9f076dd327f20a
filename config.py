# config.py
#全局配置

import logging

# === CPU 调度模块配置 (对应 模块 1) ===
DEFAULT_ALGORITHM = "FIFO"  # 默认调度算法
DEFAULT_QUANTUM = 2         # 时间片轮转 (RR) 算法的默认时间片大小
MAX_QUANTUM = 100           # 界面上允许选择的最大时间片

# === 资源同步模块配置 (对应 模块 2) ===
SYNC_EPILOGUE_CYCLES = 5    # 最后一个请求周期之后继续播放的周期数
RELEASE_DELAY_CYCLES = 1    # 每次占用资源持续的周期数 (固定为 1)

# === 回放配置 ===
PLAYBACK_INTERVAL_MS = 500  # 每个模拟周期对应的界面刷新间隔 (毫秒)

# === 输入文件 ===
INPUT_ENCODING = "utf-8"

# === 日志 ===
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
