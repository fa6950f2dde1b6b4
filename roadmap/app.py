"""Application entry point and setup for the project completion roadmap."""

import logging
import sys
from typing import Optional

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from roadmap.core.dashboard import DashboardState
from roadmap.core.phases import PhaseRepository
from roadmap.core.settings import Settings
from roadmap.ui.main_window import MainWindow


def configure_logging(level: str = "INFO") -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_window(settings: Settings, repository: Optional[PhaseRepository] = None) -> MainWindow:
    """Load the seed roster and create the main window (QApplication must exist)."""
    repo = repository or PhaseRepository(settings.seed_path)
    state = DashboardState.from_repository(repo)
    project_name = settings.project_name or repo.project_name or "Project"
    logging.info(
        "Starting %s with %d phases, %d%% complete", project_name, len(state.phases), state.progress
    )
    return MainWindow(state, project_name=project_name, settings=settings)


def run() -> None:
    """Initialize the application, load the roster, and start the main window."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = QApplication(sys.argv)
    app.setApplicationName("Roadmap")
    app.setApplicationDisplayName("Project Completion Roadmap")

    window = build_window(settings)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.resize(int(geometry.width() * 0.8), int(geometry.height() * 0.85))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
