# qt_frontend/visuals/qt_sync_timeline.py
# 功能：资源同步时间线，每个动作一行，每个周期一格，按仲裁状态着色

from PyQt6.QtWidgets import QWidget
from PyQt6.QtGui import QPainter, QColor, QPen, QFont
from PyQt6.QtCore import Qt, QRectF
from typing import Dict, List

from ossim.process_model import Action, ActionSnapshot, ActionStatus

# === 主题色彩 ===
C_BG        = QColor("#FFFFFF")
C_GRID      = QColor("#E9ECEF")
C_TEXT_MAIN = QColor("#1F2937")
C_TEXT_SUB  = QColor("#6B7280")

STATUS_COLORS = {
    ActionStatus.WAITING: QColor("#F59E0B"),
    ActionStatus.ACCESSED: QColor("#10B981"),
    ActionStatus.DONE: QColor("#CBD5E1"),
}


class QtSyncTimeline(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMinimumHeight(300)
        self.actions: List[Action] = []
        # history[cycle] = {action.key: status}
        self.history: List[Dict[tuple, ActionStatus]] = []
        self.total_cycles = 0
        self.cell_w = 28
        self.row_height = 26
        self.left_margin = 180
        self.top_margin = 40

    def set_actions(self, actions: List[Action], total_cycles: int):
        self.actions = list(actions)
        self.total_cycles = total_cycles
        self.history = []
        self.setMinimumHeight(max(300, self.top_margin + 40 + len(self.actions) * self.row_height))
        self.update()

    def update_history(self, history: List[List[ActionSnapshot]]):
        self.history = [{snap.action.key: snap.status for snap in snapshot} for snapshot in history]
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), C_BG)

        painter.setPen(C_TEXT_MAIN)
        painter.setFont(QFont("Microsoft YaHei", 10, QFont.Weight.Bold))
        painter.drawText(QRectF(0, 0, self.width(), 30), Qt.AlignmentFlag.AlignCenter,
                         f"资源同步时间线 (Timeline) - 周期 {max(len(self.history) - 1, 0)}")

        if not self.actions:
            painter.setPen(C_TEXT_SUB)
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "请先加载资源和动作文件")
            return

        # 列宽随窗口缩放，但不小于 12 像素
        columns = max(self.total_cycles + 1, 1)
        self.cell_w = max(12, min(40, (self.width() - self.left_margin - 20) / columns))

        self._draw_ruler(painter, columns)
        for row, action in enumerate(self.actions):
            y = self.top_margin + 20 + row * self.row_height
            self._draw_row(painter, row, action, y)

    def _draw_ruler(self, painter, columns):
        painter.setFont(QFont("Consolas", 8))
        painter.setPen(C_TEXT_SUB)
        step = 1 if columns <= 30 else 5
        for cycle in range(0, columns, step):
            x = self.left_margin + cycle * self.cell_w
            painter.drawText(QRectF(x, self.top_margin, self.cell_w, 18), Qt.AlignmentFlag.AlignCenter, str(cycle))

    def _draw_row(self, painter, row, action, y):
        if row % 2:
            painter.fillRect(QRectF(0, y, self.width(), self.row_height), QColor("#F8F9FA"))

        painter.setPen(C_TEXT_MAIN)
        painter.setFont(QFont("Consolas", 9))
        label = f"{action.pid} {action.kind.value} {action.resource} @{action.cycle}"
        painter.drawText(QRectF(8, y, self.left_margin - 12, self.row_height),
                         Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter, label)

        for cycle, statuses in enumerate(self.history):
            status = statuses.get(action.key)
            if status is None:
                continue
            x = self.left_margin + cycle * self.cell_w
            rect = QRectF(x + 1, y + 3, self.cell_w - 2, self.row_height - 6)
            painter.setBrush(STATUS_COLORS[status])
            painter.setPen(Qt.PenStyle.NoPen)
            painter.drawRoundedRect(rect, 3, 3)
            if status is ActionStatus.ACCESSED and self.cell_w >= 20:
                painter.setPen(QColor("white"))
                painter.setFont(QFont("Arial", 7, QFont.Weight.Bold))
                painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, action.kind.value[0])

        painter.setPen(QPen(C_GRID, 1))
        painter.drawLine(self.left_margin, int(y + self.row_height), self.width(), int(y + self.row_height))
