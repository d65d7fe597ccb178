import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from PySide6 import QtWidgets

import config
from models.roster import Roster
from services.codec import DecodeReport, decode_roster, encode_roster


def ensure_folder(p: Path) -> None:
    """Creates the folder if it does not exist."""
    p.mkdir(parents=True, exist_ok=True)


def init_paths(base_path: Path) -> None:
    """
    Initialize all global paths based on the selected base path.
    Sets up the Gym Data and Exports folders, the members file and the log file.
    """
    config.BASE_FOLDER = base_path / "Gym Data"
    ensure_folder(config.BASE_FOLDER)

    config.MEMBERS_FILE = config.BASE_FOLDER / config.MEMBERS_FILENAME

    config.EXPORT_FOLDER = base_path / "Exports"
    ensure_folder(config.EXPORT_FOLDER)

    config.LOG_FILE = config.BASE_FOLDER / "gym.log"


def _remembered_path() -> Optional[Path]:
    env = os.environ.get(config.DATA_ENV_VAR)
    if env:
        return Path(env)

    if not config.CONFIG_FILE.exists():
        return None

    try:
        content = config.CONFIG_FILE.read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.warning(f"Could not read {config.CONFIG_FILE}: {e}")
        return None

    if content and Path(content).exists():
        return Path(content)
    return None


def load_or_setup_paths() -> None:
    """
    Loads the data path from the environment or the local config file.
    If neither is set, prompts the user to select a folder via a dialog.
    """
    data_path = _remembered_path()
    if data_path:
        init_paths(data_path)
        return

    # Dialogs need a QApplication; create a temporary one if main.py has not yet
    app = QtWidgets.QApplication.instance()
    if not app:
        app = QtWidgets.QApplication(sys.argv)

    QtWidgets.QMessageBox.information(
        None, f"{config.APP_TITLE} - First Time Setup",
        "Please select a folder where the members file will be stored."
    )

    selected_dir = QtWidgets.QFileDialog.getExistingDirectory(
        None, "Select Data Storage Folder", str(Path.home())
    )

    if not selected_dir:
        QtWidgets.QMessageBox.critical(None, "Error", "Data storage path is required to continue.")
        sys.exit(0)

    data_path = Path(selected_dir)

    # Save the selection for next time
    try:
        config.CONFIG_FILE.write_text(str(data_path), encoding="utf-8")
    except OSError as e:
        logger.warning(f"Failed to save configuration: {e}")
    init_paths(data_path)


# --- MEMBERS FILE ---

def _members_path(path: Optional[Path]) -> Path:
    if path is not None:
        return Path(path)
    if config.MEMBERS_FILE is None:
        raise RuntimeError("Data folder is not set up (call init_paths first)")
    return Path(config.MEMBERS_FILE)


def write_members_text(text: str, path: Optional[Path] = None) -> str:
    """
    Writes an encoded roster to the members file.
    OSError propagates unchanged.

    Returns:
        str: The file path written.
    """
    target = _members_path(path)
    ensure_folder(target.parent)
    with open(target, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    logger.info(f"Members file written: {target}")
    return str(target)


def read_members_text(path: Optional[Path] = None) -> str:
    """
    Reads the members file.
    Raises FileNotFoundError if it does not exist.
    """
    source = _members_path(path)
    if not source.exists():
        raise FileNotFoundError(f"File does not exist: {source}")
    with open(source, "r", encoding="utf-8", newline="") as f:
        return f.read()


def save_roster(roster: Roster, path: Optional[Path] = None) -> str:
    """Encodes the roster and writes it out. Returns the file path."""
    return write_members_text(encode_roster(roster), path)


def load_roster(roster: Roster, path: Optional[Path] = None) -> DecodeReport:
    """Reads the members file and replaces the roster's content with it."""
    return decode_roster(read_members_text(path), roster)
