from typing import Optional

from PySide6 import QtWidgets, QtGui


class TextViewDialog(QtWidgets.QDialog):
    """
    Read-only monospaced text window.
    Used for the member list and for the preview of a loaded members file,
    whose columns only line up in a fixed-width font.
    """
    def __init__(self, title: str, text: str, parent: Optional[QtWidgets.QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.resize(900, 500)

        layout = QtWidgets.QVBoxLayout(self)

        view = QtWidgets.QPlainTextEdit()
        view.setReadOnly(True)
        view.setLineWrapMode(QtWidgets.QPlainTextEdit.NoWrap)
        view.setFont(QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.FixedFont))
        view.setPlainText(text)
        layout.addWidget(view)

        btn_close = QtWidgets.QPushButton("Close")
        btn_close.setFixedHeight(35)
        btn_close.clicked.connect(self.accept)
        layout.addWidget(btn_close)

        self.setStyleSheet("""
            QDialog { background: #f0f2f5; }
            QPlainTextEdit { background: white; color: #212529; border: 1px solid #ced4da; }
            QPushButton { background: #1c3957; color: white; border-radius: 4px; font-weight: bold; }
        """)
