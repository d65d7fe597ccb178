from pathlib import Path
from typing import Optional

from PySide6 import QtCore

from services.file_manager import read_members_text


class WorkerSignals(QtCore.QObject):
    """
    Signals for the LoadWorker.

    Attributes:
        finished (str): Emitted with the raw file content.
        error (str): Emitted when the file is missing or unreadable.
    """
    finished = QtCore.Signal(str)
    error = QtCore.Signal(str)


class LoadWorker(QtCore.QRunnable):
    """
    Background worker that reads the members file.
    Decoding happens back on the GUI thread, which owns the roster.
    """
    def __init__(self, path: Optional[Path] = None):
        super().__init__()
        self.path = path
        self.signals = WorkerSignals()

    @QtCore.Slot()
    def run(self) -> None:
        try:
            text = read_members_text(self.path)
            self.signals.finished.emit(text)
        except FileNotFoundError:
            self.signals.error.emit("File does not exist!")
        except (OSError, UnicodeDecodeError) as e:
            self.signals.error.emit(f"Error reading from file: {e}")
