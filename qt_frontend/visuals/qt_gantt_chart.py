# qt_frontend/visuals/qt_gantt_chart.py
# 功能：按进程分行的 CPU 调度甘特图，支持逐周期回放

from PyQt6.QtWidgets import QWidget
from PyQt6.QtGui import QPainter, QColor, QPen, QFont, QLinearGradient
from PyQt6.QtCore import Qt, QRectF
from typing import List, Tuple

from ossim.process_model import Segment

# 预定义一组扁平化颜色，用于区分进程
PROCESS_COLORS = [
    QColor("#FF6B6B"), QColor("#4ECDC4"), QColor("#45B7D1"),
    QColor("#FFA07A"), QColor("#98D8C8"), QColor("#F7DC6F"),
    QColor("#BB8FCE"), QColor("#F1948A"), QColor("#85C1E9")
]


def color_for_index(index: int) -> QColor:
    return PROCESS_COLORS[index % len(PROCESS_COLORS)]


class QtGanttChart(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.pids: List[str] = []
        self.segments: List[Tuple[str, Segment]] = []
        self.total_cycles = 0
        self.current_cycle = 0
        self.setMinimumHeight(300)
        # 白色背景，轻微圆角
        self.setStyleSheet("background-color: #FFFFFF; border-radius: 8px;")
        self.pid_color_map = {}

    def set_processes(self, pids: List[str]):
        """设置行 (进程) 顺序并分配颜色，清空已显示的片段。"""
        self.pids = list(pids)
        self.pid_color_map = {pid: color_for_index(i) for i, pid in enumerate(self.pids)}
        self.segments = []
        self.total_cycles = 0
        self.current_cycle = 0
        self.update()

    def update_schedule_data(self, segments: List[Tuple[str, Segment]], current_cycle: int, total_cycles: int):
        self.segments = segments
        self.current_cycle = current_cycle
        self.total_cycles = total_cycles
        self.update()

    def _get_color(self, pid):
        return self.pid_color_map.get(pid, QColor("#AAB7B8"))

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        w = self.width()
        h = self.height()

        # 布局参数
        margin_left = 80
        margin_right = 30
        margin_top = 40
        margin_bottom = 40

        # 1. 绘制标题背景栏
        header_rect = QRectF(0, 0, w, 30)
        painter.fillRect(header_rect, QColor("#F5F5F5"))
        painter.setPen(QColor("#333333"))
        painter.setFont(QFont("Microsoft YaHei", 10, QFont.Weight.Bold))
        painter.drawText(header_rect, Qt.AlignmentFlag.AlignCenter,
                         f"进程调度时序图 (Gantt Chart) - 周期 {self.current_cycle}")

        if not self.pids:
            painter.setPen(QColor("#888888"))
            painter.drawText(QRectF(0, margin_top, w, h - margin_top), Qt.AlignmentFlag.AlignCenter,
                             "请先加载进程文件")
            return

        # 计算绘图区
        chart_w = w - margin_left - margin_right
        chart_h = h - margin_top - margin_bottom
        row_h = chart_h / len(self.pids)
        bar_h = min(row_h * 0.6, 36)

        # 2. 计算时间比例 (至少显示 10 个周期)
        max_time = max(self.total_cycles, 10)
        time_scale = chart_w / max_time

        # 3. 绘制每个进程轨道
        row_of = {}
        for i, pid in enumerate(self.pids):
            y_base = margin_top + i * row_h
            y_center = y_base + row_h / 2
            row_of[pid] = y_center

            painter.setPen(QPen(QColor("#E0E0E0"), 1))
            painter.drawLine(int(margin_left), int(y_center), int(w - margin_right), int(y_center))

            painter.setPen(QColor("#555555"))
            painter.setFont(QFont("Arial", 9, QFont.Weight.Bold))
            label_rect = QRectF(0, y_base, margin_left - 10, row_h)
            painter.drawText(label_rect, Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter, pid)

        # 4. 绘制执行片段
        for pid, seg in self.segments:
            if pid not in row_of:
                continue
            x = margin_left + seg.start * time_scale
            width = seg.duration * time_scale
            rect = QRectF(x, row_of[pid] - bar_h / 2, width, bar_h)

            base_color = self._get_color(pid)
            gradient = QLinearGradient(rect.topLeft(), rect.bottomLeft())
            gradient.setColorAt(0, base_color.lighter(110))
            gradient.setColorAt(1, base_color)

            painter.setBrush(gradient)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.drawRoundedRect(rect, 4, 4)

            if width > 20:
                painter.setPen(QColor("white"))
                painter.setFont(QFont("Arial", 8))
                painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, str(seg.duration))

        # 5. 绘制底部周期轴
        painter.setPen(QPen(QColor("#888888"), 1))
        axis_y = h - margin_bottom + 10
        painter.drawLine(int(margin_left), int(axis_y), int(w - margin_right), int(axis_y))

        step = 1
        if max_time > 20: step = 2
        if max_time > 50: step = 5
        if max_time > 100: step = 10

        painter.setFont(QFont("Arial", 8))
        for t in range(0, int(max_time) + 1, step):
            x = margin_left + t * time_scale
            painter.drawLine(int(x), int(axis_y), int(x), int(axis_y + 5))
            painter.drawText(int(x - 10), int(axis_y + 20), str(t))

        # 6. 当前周期游标
        cursor_x = margin_left + self.current_cycle * time_scale
        painter.setPen(QPen(QColor("#C0392B"), 2, Qt.PenStyle.DashLine))
        painter.drawLine(int(cursor_x), int(margin_top), int(cursor_x), int(axis_y))
