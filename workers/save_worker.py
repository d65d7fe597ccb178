from pathlib import Path
from typing import Optional

from PySide6 import QtCore

from services.file_manager import write_members_text


class WorkerSignals(QtCore.QObject):
    """
    Defines the signals available from a running worker thread.

    Attributes:
        finished (str): Emitted with the saved file path when successful.
        error (str): Emitted with an error message if saving fails.
    """
    finished = QtCore.Signal(str)
    error = QtCore.Signal(str)


class SaveWorker(QtCore.QRunnable):
    """
    Background worker that writes an already encoded roster to the members file.
    The roster itself is encoded on the GUI thread; only the text crosses over.
    """
    def __init__(self, text: str, path: Optional[Path] = None):
        super().__init__()
        self.text = text
        self.path = path
        self.signals = WorkerSignals()

    @QtCore.Slot()
    def run(self) -> None:
        try:
            path = write_members_text(self.text, self.path)
            self.signals.finished.emit(path)
        except OSError as e:
            self.signals.error.emit(f"Error saving file: {e}")
