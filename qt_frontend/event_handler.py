# qt_frontend/event_handler.py
# 负责GUI事件分发、文件加载和回放定时器

import logging

from PyQt6.QtWidgets import QMessageBox, QFileDialog
from PyQt6.QtCore import QTimer

from config import PLAYBACK_INTERVAL_MS
from ossim.system_status import STATUS
from ossim.errors import SimulatorError
from ossim.process_model import Algorithm, SyncMode
from ossim.data_loader import load_processes, load_resources, load_actions

logger = logging.getLogger(__name__)

FILE_FILTER = "Text files (*.txt *.csv);;All files (*)"


class EventHandler:
    def __init__(self, main_window):
        self.main_window = main_window  # 主窗口实例

        # 回放定时器：每次超时推进一个逻辑周期
        self.schedule_timer = QTimer(main_window)
        self.schedule_timer.setInterval(PLAYBACK_INTERVAL_MS)
        self.schedule_timer.timeout.connect(self.on_schedule_tick)

        self.sync_timer = QTimer(main_window)
        self.sync_timer.setInterval(PLAYBACK_INTERVAL_MS)
        self.sync_timer.timeout.connect(self.on_sync_tick)

    def _warn(self, title, error):
        logger.warning("%s: %s", title, error)
        QMessageBox.warning(self.main_window, title, str(error))

    def _ask_file(self, caption):
        path, _ = QFileDialog.getOpenFileName(self.main_window, caption, "", FILE_FILTER)
        return path

    # --- CPU 调度 ---

    def set_algorithm(self, text: str):
        """设置当前调度算法"""
        STATUS.algorithm = Algorithm.parse(text)
        self.main_window.quantum_spin.setEnabled(STATUS.algorithm is Algorithm.RR)
        self.main_window.status_bar.showMessage(f"已选择调度算法: {STATUS.algorithm.value}", 3000)

    def set_quantum(self, value: int):
        STATUS.quantum = value

    def load_processes_file(self):
        """处理 '加载进程' 按钮点击事件"""
        path = self._ask_file("选择进程文件")
        if not path:
            return
        try:
            processes = load_processes(path)
        except SimulatorError as e:
            # 加载失败时保留原有数据
            self._warn("加载失败", e)
            return

        self.stop_schedule()
        STATUS.set_processes(processes)
        self.main_window.update_process_table()
        self.main_window.status_bar.showMessage(f"已加载 {len(processes)} 个进程。", 3000)

    def start_schedule(self):
        """处理 '开始模拟' 按钮点击事件：计算调度并开始回放"""
        if self.schedule_timer.isActive():
            QMessageBox.warning(self.main_window, "警告", "调度模拟已在运行。")
            return
        try:
            STATUS.run_schedule()
        except SimulatorError as e:
            self._warn("无法调度", e)
            return

        self.main_window.reset_gantt()
        self.main_window.update_metrics()
        self.schedule_timer.start()
        self.main_window.status_bar.showMessage(f"调度模拟已启动！(算法: {STATUS.algorithm.value})", 3000)

    def stop_schedule(self):
        self.schedule_timer.stop()

    def reset_schedule(self):
        self.schedule_timer.stop()
        if STATUS.schedule_playback is not None:
            STATUS.schedule_playback.reset()
        self.main_window.reset_gantt()
        self.main_window.status_bar.showMessage("调度回放已重置。", 3000)

    def on_schedule_tick(self):
        playback = STATUS.schedule_playback
        if playback is None or not playback.tick():
            self.schedule_timer.stop()
            return
        self.main_window.update_gantt()
        if playback.finished:
            self.schedule_timer.stop()
            self.main_window.status_bar.showMessage("调度回放完成。", 3000)

    # --- 资源同步 ---

    def set_sync_mode(self, text: str):
        self.stop_sync()
        STATUS.set_sync_mode(SyncMode(text))
        self.main_window.reset_timeline()
        self.main_window.status_bar.showMessage(f"同步模式: {text}", 3000)

    def load_resources_file(self):
        path = self._ask_file("选择资源文件")
        if not path:
            return
        try:
            resources = load_resources(path)
        except SimulatorError as e:
            self._warn("加载失败", e)
            return

        self.stop_sync()
        STATUS.set_resources(resources)
        self.main_window.update_sync_tables()
        self.main_window.reset_timeline()
        self.main_window.status_bar.showMessage(f"已加载 {len(resources)} 个资源。", 3000)

    def load_actions_file(self):
        path = self._ask_file("选择动作文件")
        if not path:
            return
        try:
            actions = load_actions(path)
        except SimulatorError as e:
            self._warn("加载失败", e)
            return

        self.stop_sync()
        STATUS.set_actions(actions)
        self.main_window.update_sync_tables()
        self.main_window.reset_timeline()
        unknown = STATUS.sync_engine.unknown_actions()
        if unknown:
            names = ", ".join(sorted({a.resource for a in unknown}))
            QMessageBox.warning(self.main_window, "未声明的资源",
                                f"以下资源未在资源文件中声明，相关动作将一直等待: {names}")
        self.main_window.status_bar.showMessage(f"已加载 {len(actions)} 个动作。", 3000)

    def start_sync(self):
        if not STATUS.actions:
            QMessageBox.warning(self.main_window, "警告", "请先加载动作文件。")
            return
        if STATUS.sync_playback.finished:
            self.reset_sync()
        self.sync_timer.start()
        self.main_window.status_bar.showMessage("同步模拟已启动！", 3000)

    def stop_sync(self):
        self.sync_timer.stop()

    def reset_sync(self):
        self.sync_timer.stop()
        STATUS.sync_playback.reset()
        self.main_window.reset_timeline()
        self.main_window.status_bar.showMessage("同步模拟已重置。", 3000)

    def on_sync_tick(self):
        if STATUS.sync_playback.tick() is None:
            self.sync_timer.stop()
            return
        self.main_window.update_timeline()
        if STATUS.sync_playback.finished:
            self.sync_timer.stop()
            self.main_window.status_bar.showMessage("同步模拟完成。", 3000)

    def close_application(self):
        """关闭应用程序"""
        self.stop_schedule()
        self.stop_sync()
        self.main_window.close()
