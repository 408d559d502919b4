from __future__ import annotations

import app_paths
from logger import configure_file_logging, get_logger, install_excepthook


def run() -> None:
    """Start the student admin window (console script ``student-admin``)."""
    configure_file_logging(app_paths.log_dir())
    install_excepthook()
    log = get_logger()
    log.info("Student Management System - starting")

    # Tk is imported here so ``app`` stays importable on headless machines
    from ui_main import create_app

    create_app().mainloop()


if __name__ == "__main__":
    run()
