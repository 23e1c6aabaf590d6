from PySide6.QtCore import Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import QColorDialog, QPushButton, QWidget


class ColorButton(QPushButton):
    """Push button showing a colour swatch; clicking opens a colour picker."""
    color_changed = Signal(str)

    def __init__(self, color: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._color = color
        self.setMinimumHeight(24)
        self.clicked.connect(self._pick)
        self._update_swatch()

    def color(self) -> str:
        return self._color

    def set_color(self, color: str) -> None:
        """Set without emitting ``color_changed``."""
        self._color = color
        self._update_swatch()

    def _update_swatch(self) -> None:
        self.setText(self._color)
        self.setStyleSheet(f"background-color: {self._color}; color: white;")

    def _pick(self) -> None:
        chosen = QColorDialog.getColor(QColor(self._color), self, "Choose colour")
        if chosen.isValid():
            self.set_color(chosen.name())
            self.color_changed.emit(self._color)
