import sys
import logging
import argparse

from PyQt6.QtWidgets import QApplication

from flexgrid.app.main_window import MainWindow
from flexgrid.logging_config import setup_logging
from flexgrid.version import APP_VERSION

def main():
    parser = argparse.ArgumentParser(description="Flexible grid layout demo")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    parser.add_argument("--debug-layout", action="store_true", help="also log every layout pass")
    parser.add_argument("--log-file", help="write the log to this file as well")
    args, qt_args = parser.parse_known_args()

    setup_logging(
        logging.DEBUG if args.debug else logging.INFO,
        log_file=args.log_file,
        engine_level=logging.DEBUG if args.debug_layout else logging.INFO,
    )

    app = QApplication(sys.argv[:1] + qt_args)
    app.setApplicationName("Flexible Grid Layout")
    app.setApplicationVersion(APP_VERSION)

    window = MainWindow()
    window.show()

    sys.exit(app.exec())

if __name__ == "__main__":
    main()
