# qt_frontend/main_window.py
# 主窗口类：CPU 调度 (甘特图 + 指标) 与 资源同步 (时间线) 两个选项卡

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QTabWidget,
    QTableWidget, QTableWidgetItem, QLabel, QPushButton, QStatusBar,
    QHeaderView, QGroupBox, QComboBox, QSpinBox, QScrollArea
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor

from config import MAX_QUANTUM
from ossim.system_status import STATUS
from ossim.process_model import Algorithm, SyncMode
from qt_frontend.event_handler import EventHandler
from qt_frontend.visuals.qt_gantt_chart import QtGanttChart, color_for_index
from qt_frontend.visuals.qt_sync_timeline import QtSyncTimeline

BTN_LOAD_STYLE = "background-color: #5D6D7E; color: white; padding: 5px 15px;"
BTN_START_STYLE = "background-color: #27AE60; color: white; padding: 5px 15px; font-weight: bold;"
BTN_STOP_STYLE = "background-color: #E67E22; color: white; padding: 5px 15px;"
BTN_RESET_STYLE = "background-color: #C0392B; color: white; padding: 5px 15px;"
METRIC_STYLE = "font-weight: bold; font-size: 9pt; border: 1px solid #E0E0E0; padding: 8px 12px; border-radius: 4px; margin: 1px;"


def _make_table(headers):
    table = QTableWidget()
    table.setColumnCount(len(headers))
    table.setHorizontalHeaderLabels(headers)
    table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
    table.setAlternatingRowColors(True)
    table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
    table.setStyleSheet("QTableWidget { selection-background-color: #D6EAF8; selection-color: black; }")
    return table


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("操作系统模拟器 - 进程调度与资源同步")
        self.setGeometry(100, 100, 1400, 850)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self.event_handler = EventHandler(self)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        # === 顶部：选项卡 ===
        self.tab_widget = QTabWidget()
        self.tab_widget.setStyleSheet("""
            QTabWidget::pane { border: 1px solid #C2C7CB; background: white; }
            QTabBar::tab { height: 35px; width: 160px; font-weight: bold; }
        """)

        self.init_scheduler_tab()
        self.init_sync_tab()
        main_layout.addWidget(self.tab_widget)

        self.setup_connections()

        # 设置初始算法
        self.algorithm_selector.setCurrentText(STATUS.algorithm.value)
        self.quantum_spin.setEnabled(STATUS.algorithm is Algorithm.RR)
        self.update_metrics()

    # === CPU 调度选项卡 ===

    def init_scheduler_tab(self):
        self.scheduler_page = QWidget()
        main_layout = QVBoxLayout(self.scheduler_page)
        main_layout.setSpacing(10)
        main_layout.setContentsMargins(5, 5, 5, 5)

        # 1. 控制台
        panel = QGroupBox("控制台")
        panel.setMaximumHeight(80)
        layout = QHBoxLayout(panel)

        layout.addWidget(QLabel("调度算法:"))
        self.algorithm_selector = QComboBox()
        self.algorithm_selector.addItems([algo.value for algo in Algorithm])
        self.algorithm_selector.setMinimumWidth(150)
        layout.addWidget(self.algorithm_selector)

        layout.addWidget(QLabel("时间片 (RR):"))
        self.quantum_spin = QSpinBox()
        self.quantum_spin.setRange(1, MAX_QUANTUM)
        self.quantum_spin.setValue(STATUS.quantum)
        layout.addWidget(self.quantum_spin)

        layout.addStretch(1)

        self.btn_load_processes = QPushButton("加载进程")
        self.btn_sched_start = QPushButton("开始模拟")
        self.btn_sched_stop = QPushButton("暂停")
        self.btn_sched_reset = QPushButton("重置")
        self.btn_load_processes.setStyleSheet(BTN_LOAD_STYLE)
        self.btn_sched_start.setStyleSheet(BTN_START_STYLE)
        self.btn_sched_stop.setStyleSheet(BTN_STOP_STYLE)
        self.btn_sched_reset.setStyleSheet(BTN_RESET_STYLE)
        for btn in [self.btn_load_processes, self.btn_sched_start, self.btn_sched_stop, self.btn_sched_reset]:
            layout.addWidget(btn)
        main_layout.addWidget(panel)

        # 2. 中部：进程表和甘特图并排
        upper_layout = QHBoxLayout()
        self.process_table = _make_table(["PID", "执行时间", "到达时间", "优先级", "开始", "完成", "等待"])
        self.process_table.setMaximumWidth(520)
        upper_layout.addWidget(self.process_table, 1)

        self.gantt_chart = QtGanttChart()
        self.gantt_chart.setMinimumHeight(450)
        upper_layout.addWidget(self.gantt_chart, 2)
        main_layout.addLayout(upper_layout)

        # 3. 下部：关键性能指标横向排列
        metrics_group = QGroupBox("关键性能指标")
        metrics_layout = QHBoxLayout(metrics_group)
        metrics_layout.setSpacing(10)
        metrics_layout.setContentsMargins(8, 5, 8, 5)

        self.metric_wait = QLabel()
        self.metric_turnaround = QLabel()
        self.metric_throughput = QLabel()
        self.metric_cpu = QLabel()
        for lbl in [self.metric_wait, self.metric_turnaround, self.metric_throughput, self.metric_cpu]:
            lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
            lbl.setStyleSheet(METRIC_STYLE)
            lbl.setMinimumWidth(150)
            lbl.setFixedHeight(60)
            metrics_layout.addWidget(lbl)
        main_layout.addWidget(metrics_group)

        self.tab_widget.addTab(self.scheduler_page, "CPU 调度")

    # === 资源同步选项卡 ===

    def init_sync_tab(self):
        self.sync_page = QWidget()
        main_layout = QVBoxLayout(self.sync_page)
        main_layout.setContentsMargins(5, 5, 5, 5)

        panel = QGroupBox("控制台")
        panel.setMaximumHeight(80)
        layout = QHBoxLayout(panel)

        layout.addWidget(QLabel("同步模式:"))
        self.mode_selector = QComboBox()
        self.mode_selector.addItems([mode.value for mode in SyncMode])
        layout.addWidget(self.mode_selector)

        layout.addStretch(1)
        self.lbl_cycle = QLabel("周期: -")
        self.lbl_cycle.setStyleSheet("font-weight: bold; color: #2E86C1;")
        layout.addWidget(self.lbl_cycle)
        layout.addStretch(1)

        self.btn_load_resources = QPushButton("加载资源")
        self.btn_load_actions = QPushButton("加载动作")
        self.btn_sync_start = QPushButton("开始模拟")
        self.btn_sync_stop = QPushButton("暂停")
        self.btn_sync_reset = QPushButton("重置")
        self.btn_load_resources.setStyleSheet(BTN_LOAD_STYLE)
        self.btn_load_actions.setStyleSheet(BTN_LOAD_STYLE)
        self.btn_sync_start.setStyleSheet(BTN_START_STYLE)
        self.btn_sync_stop.setStyleSheet(BTN_STOP_STYLE)
        self.btn_sync_reset.setStyleSheet(BTN_RESET_STYLE)
        for btn in [self.btn_load_resources, self.btn_load_actions, self.btn_sync_start,
                    self.btn_sync_stop, self.btn_sync_reset]:
            layout.addWidget(btn)
        main_layout.addWidget(panel)

        body = QHBoxLayout()
        tables = QVBoxLayout()
        self.resource_table = _make_table(["资源", "容量", "可用"])
        self.action_table = _make_table(["PID", "动作", "资源", "请求周期"])
        tables.addWidget(self.resource_table, 1)
        tables.addWidget(self.action_table, 2)
        tables_widget = QWidget()
        tables_widget.setLayout(tables)
        tables_widget.setMaximumWidth(420)
        body.addWidget(tables_widget, 1)

        self.sync_timeline = QtSyncTimeline()
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.sync_timeline)
        body.addWidget(scroll, 2)
        main_layout.addLayout(body)

        self.tab_widget.addTab(self.sync_page, "资源同步")

    def setup_connections(self):
        self.algorithm_selector.currentTextChanged.connect(self.event_handler.set_algorithm)
        self.quantum_spin.valueChanged.connect(self.event_handler.set_quantum)
        self.btn_load_processes.clicked.connect(self.event_handler.load_processes_file)
        self.btn_sched_start.clicked.connect(self.event_handler.start_schedule)
        self.btn_sched_stop.clicked.connect(self.event_handler.stop_schedule)
        self.btn_sched_reset.clicked.connect(self.event_handler.reset_schedule)

        self.mode_selector.currentTextChanged.connect(self.event_handler.set_sync_mode)
        self.btn_load_resources.clicked.connect(self.event_handler.load_resources_file)
        self.btn_load_actions.clicked.connect(self.event_handler.load_actions_file)
        self.btn_sync_start.clicked.connect(self.event_handler.start_sync)
        self.btn_sync_stop.clicked.connect(self.event_handler.stop_sync)
        self.btn_sync_reset.clicked.connect(self.event_handler.reset_sync)

    # === 调度视图刷新 ===

    def update_process_table(self):
        procs = STATUS.processes
        result = STATUS.schedule_result
        self.process_table.setRowCount(len(procs))
        for idx, p in enumerate(procs):
            pid_item = QTableWidgetItem(p.pid)
            pid_item.setBackground(color_for_index(idx))
            self.process_table.setItem(idx, 0, pid_item)
            self.process_table.setItem(idx, 1, QTableWidgetItem(str(p.burst_time)))
            self.process_table.setItem(idx, 2, QTableWidgetItem(str(p.arrival_time)))
            self.process_table.setItem(idx, 3, QTableWidgetItem(str(p.priority)))
            if result is None:
                for col in (4, 5, 6):
                    self.process_table.setItem(idx, col, QTableWidgetItem("-"))
            else:
                sp = result.get(p.pid)
                self.process_table.setItem(idx, 4, QTableWidgetItem(str(sp.start_time)))
                self.process_table.setItem(idx, 5, QTableWidgetItem(str(sp.finish_time)))
                self.process_table.setItem(idx, 6, QTableWidgetItem(str(sp.waiting_time)))
        self.gantt_chart.set_processes([p.pid for p in procs])

    def reset_gantt(self):
        self.update_process_table()
        self.update_gantt()

    def update_gantt(self):
        playback = STATUS.schedule_playback
        if playback is None:
            self.gantt_chart.update_schedule_data([], 0, 0)
            return
        self.gantt_chart.update_schedule_data(playback.visible_segments(), playback.current_cycle,
                                              playback.result.makespan)

    def update_metrics(self):
        m = STATUS.metrics
        self.metric_wait.setText(f"平均等待\n{m.avg_waiting_time:.2f}")
        self.metric_turnaround.setText(f"平均周转\n{m.avg_turnaround_time:.2f}")
        self.metric_throughput.setText(f"吞吐量\n{m.throughput:.4f}")
        self.metric_cpu.setText(f"CPU 利用率\n{m.cpu_utilization * 100:.1f}%")

    # === 同步视图刷新 ===

    def update_sync_tables(self):
        engine = STATUS.sync_engine
        self.resource_table.setRowCount(len(STATUS.resources))
        for idx, res in enumerate(STATUS.resources):
            self.resource_table.setItem(idx, 0, QTableWidgetItem(res.name))
            self.resource_table.setItem(idx, 1, QTableWidgetItem(str(res.capacity)))
            self.resource_table.setItem(idx, 2, QTableWidgetItem(str(engine.availability(res.name))))

        self.action_table.setRowCount(len(STATUS.actions))
        for idx, action in enumerate(STATUS.actions):
            self.action_table.setItem(idx, 0, QTableWidgetItem(action.pid))
            self.action_table.setItem(idx, 1, QTableWidgetItem(action.kind.value))
            resource_item = QTableWidgetItem(action.resource)
            if engine.lookup_resource(action.resource) is None:
                resource_item.setForeground(QColor("#C0392B"))
            self.action_table.setItem(idx, 2, resource_item)
            self.action_table.setItem(idx, 3, QTableWidgetItem(str(action.cycle)))

    def reset_timeline(self):
        playback = STATUS.sync_playback
        self.sync_timeline.set_actions(STATUS.actions, playback.last_cycle)
        self.lbl_cycle.setText("周期: -")
        self.update_sync_tables()

    def update_timeline(self):
        playback = STATUS.sync_playback
        self.sync_timeline.update_history(playback.history)
        self.lbl_cycle.setText(f"周期: {playback.current_cycle} / {playback.last_cycle}")
        self.update_sync_tables()

    def closeEvent(self, event):
        self.event_handler.stop_schedule()
        self.event_handler.stop_sync()
        super().closeEvent(event)
