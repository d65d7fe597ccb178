from typing import List, Optional

from loguru import logger
from PySide6 import QtWidgets

import config
from core.logging import setup_logging
from models.roster import Roster
from services.file_manager import load_or_setup_paths
from ui.dashboards.member_dashboard import MemberDashboard


class GymApp(QtWidgets.QApplication):
    """
    The main Application class that manages the application lifecycle.
    1. Sets up the data folder and logging.
    2. Creates the empty roster owned by the GUI thread.
    3. Shows the member dashboard.
    """
    def __init__(self, args: List[str]):
        super().__init__(args)
        self.roster = Roster()
        self.main_window: Optional[QtWidgets.QMainWindow] = None

    def start(self) -> None:
        """Initializes the environment and shows the first screen."""
        load_or_setup_paths()
        setup_logging(config.LOG_LEVEL, config.LOG_FILE)
        logger.info(f"Data folder: {config.BASE_FOLDER}")

        self.main_window = MemberDashboard(self.roster)
        self.main_window.show()
