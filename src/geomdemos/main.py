"""
Application Initialization
==========================
This module parses the command line, sets up logging and starts the Qt Event
Loop with the main window.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging before anything else logs.
2. Instantiates the Main Window (View), which owns the demos (Controllers).
3. Prevents circular import errors by being the orchestrator.
"""
import argparse
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from geomdemos.config import VISIBLE_APP_NAME
from geomdemos.logging_config import setup_logging
from geomdemos.view.main_window import DEMO_KEYS, MainWindow


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="geomdemos", description=VISIBLE_APP_NAME)
    parser.add_argument("demo", nargs="?", choices=DEMO_KEYS, default=DEMO_KEYS[0],
                        help="demo shown on startup")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=args.log_level, log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication(sys.argv[:1])
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Initialize the Main Window
    window = MainWindow(initial_demo=args.demo)
    window.show()

    # 4. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
