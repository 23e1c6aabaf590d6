"""
String System Control Panel
"""
import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QSpinBox, QGroupBox, QFormLayout, QCheckBox, QComboBox, QGridLayout
)
from PySide6.QtCore import Signal, Qt

from geomdemos.config import MAX_BASE, MAX_LEVELS, MIN_BASE, MIN_LEVELS
from geomdemos.controller.base import Refresh
from geomdemos.controller.string_demo import StringSystemDemo
from geomdemos.errors import InvalidParameterError
from geomdemos.model.layouts import list_layouts
from geomdemos.view.widgets.color_button import ColorButton

logger = logging.getLogger(__name__)

DIGIT_COLUMNS = 5


class StringSystemControlPanel(QWidget):
    # Emitted after an accepted change, carrying the Refresh level
    changed = Signal(int)

    def __init__(self, demo: StringSystemDemo) -> None:
        super().__init__()
        self.demo = demo
        self._digit_boxes: list[QCheckBox] = []

        layout = QVBoxLayout(self)

        # --- System Group ---
        grp = QGroupBox("String system")
        form = QFormLayout(grp)

        self.base_spin = QSpinBox()
        self.base_spin.setRange(MIN_BASE, MAX_BASE)
        self.base_spin.valueChanged.connect(lambda v: self._apply(base=v))
        form.addRow("Base:", self.base_spin)

        self.n_spin = QSpinBox()
        self.n_spin.setRange(MIN_LEVELS, MAX_LEVELS)
        self.n_spin.valueChanged.connect(lambda v: self._apply(n=v))
        form.addRow("Levels (n):", self.n_spin)

        self.model_combo = QComboBox()
        self.model_combo.addItems([str(key) for key in list_layouts()])
        self.model_combo.currentTextChanged.connect(lambda text: self._apply(model=text))
        form.addRow("Model:", self.model_combo)

        layout.addWidget(grp)

        # --- Appearance Group ---
        grp_look = QGroupBox("Appearance")
        form_look = QFormLayout(grp_look)

        self.color_btn = ColorButton(demo.settings.color)
        self.color_btn.color_changed.connect(lambda c: self._apply(color=c))
        form_look.addRow("Color:", self.color_btn)

        self.chk_one_color = QCheckBox("")
        self.chk_one_color.toggled.connect(lambda on: self._apply(one_color=on))
        form_look.addRow("One color:", self.chk_one_color)

        layout.addWidget(grp_look)

        # --- Digits Group (rebuilt whenever the base changes) ---
        self.grp_digits = QGroupBox("Digits")
        self.digits_grid = QGridLayout(self.grp_digits)
        layout.addWidget(self.grp_digits)

        # --- Status Info ---
        self.lbl_status = QLabel("")
        self.lbl_status.setAlignment(Qt.AlignCenter)
        self.lbl_status.setWordWrap(True)
        layout.addWidget(self.lbl_status)

        layout.addStretch()

        self.load_from_state()

    def load_from_state(self) -> None:
        """Sync widgets with the demo settings without re-triggering changes."""
        s = self.demo.settings
        widgets = (self.base_spin, self.n_spin, self.model_combo, self.color_btn, self.chk_one_color)
        for w in widgets:
            w.blockSignals(True)
        try:
            self.base_spin.setValue(s.base)
            self.n_spin.setValue(s.n)
            self.model_combo.setCurrentText(str(s.model))
            self.color_btn.set_color(s.color)
            self.chk_one_color.setChecked(s.one_color)
        finally:
            for w in widgets:
                w.blockSignals(False)
        self._rebuild_digit_boxes()
        self._update_status()

    def _rebuild_digit_boxes(self) -> None:
        digits = self.demo.settings.digits
        if len(self._digit_boxes) != len(digits):
            for box in self._digit_boxes:
                self.digits_grid.removeWidget(box)
                box.deleteLater()
            self._digit_boxes = []
            for i in range(len(digits)):
                box = QCheckBox(str(i))
                box.toggled.connect(lambda on, i=i: self._apply_digit(i, on))
                self.digits_grid.addWidget(box, i // DIGIT_COLUMNS, i % DIGIT_COLUMNS)
                self._digit_boxes.append(box)
        for box, on in zip(self._digit_boxes, digits):
            box.blockSignals(True)
            box.setChecked(on)
            box.blockSignals(False)

    def _update_status(self, error: str = "") -> None:
        if error:
            self.lbl_status.setStyleSheet("color: #b00020;")
            self.lbl_status.setText(error)
            return
        s = self.demo.settings
        self.lbl_status.setStyleSheet("color: gray;")
        self.lbl_status.setText(f"{len(s.include_set())} active digit(s), {s.n} level(s)")

    def _apply(self, **changes) -> None:
        self._run(lambda: self.demo.apply(**changes))

    def _apply_digit(self, i: int, enabled: bool) -> None:
        self._run(lambda: self.demo.set_digit(i, enabled))

    def _run(self, action) -> None:
        try:
            refresh: Refresh = action()
        except InvalidParameterError as e:
            self.load_from_state()
            self._update_status(str(e))
            return
        self.load_from_state()
        self.changed.emit(int(refresh))
