#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import os
import sys

# 添加项目根目录到Python路径
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

# PyQt5导入
from PyQt5.QtWidgets import QApplication, QMessageBox
from PyQt5.QtCore import Qt


def setup_logging():
    """控制台日志，GREP_HIGHLIGHT_DEBUG=1 时输出调试信息"""
    level = logging.DEBUG if os.environ.get("GREP_HIGHLIGHT_DEBUG") else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def setup_application():
    """设置应用程序"""
    # 设置高DPI支持（PyQt5）
    if hasattr(Qt, 'AA_EnableHighDpiScaling'):
        QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
    if hasattr(Qt, 'AA_UseHighDpiPixmaps'):
        QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)

    app = QApplication(sys.argv)

    # QSettings 默认位置依赖这些属性
    app.setApplicationName("GrepHighlight")
    app.setApplicationVersion("1.0")
    app.setOrganizationName("LSBT")

    return app


def check_dependencies():
    """检查依赖模块"""
    missing_modules = []

    for module in ("logic.match_engine", "logic.highlight_engine", "logic.config_store",
                   "logic.sync_protocol", "widgets.grep_input_panel", "widgets.result_view"):
        try:
            __import__(module)
            print(f"✓ {module} 模块导入成功")
        except ImportError as e:
            missing_modules.append((module, str(e)))

    if missing_modules:
        print("\n缺少以下模块:")
        for module, error in missing_modules:
            print(f"  - {module}: {error}")
        return False

    return True


def main():
    """主函数"""
    print("=" * 50)
    print("GrepHighlight 启动中...")
    print("=" * 50)

    setup_logging()

    print("\n检查依赖模块...")
    if not check_dependencies():
        return 1

    app = setup_application()

    from ui.main_window import MainWindow
    try:
        window = MainWindow()
    except Exception as e:
        logging.getLogger(__name__).exception("main window creation failed")
        QMessageBox.critical(None, "窗口创建错误", f"创建主窗口失败:\n{str(e)}")
        return 1

    for path in sys.argv[1:]:
        if os.path.isfile(path):
            window.load_file(path)

    window.show()
    print("✓ 主窗口显示成功")

    exit_code = app.exec_()
    print(f"\n应用程序退出，退出码: {exit_code}")
    return exit_code


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n程序被用户中断")
        sys.exit(0)
