# main.py
# 应用启动入口

import sys
import os
import logging

# 在任何其他导入之前，添加项目根目录到路径
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.append(project_root)


from PyQt6.QtWidgets import QApplication

from config import LOG_FORMAT, LOG_LEVEL
from qt_frontend.main_window import MainWindow


def main():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    app = QApplication(sys.argv)

    main_window = MainWindow()
    main_window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
