"""
Klein Bottle Control Panel
"""
import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QDoubleSpinBox, QGroupBox, QFormLayout, QCheckBox
)
from PySide6.QtCore import Signal, Qt

from geomdemos.config import KLEIN_V_RANGE, KLEIN_V_STEP
from geomdemos.controller.base import Refresh
from geomdemos.controller.klein_demo import KleinBottleDemo
from geomdemos.errors import InvalidParameterError
from geomdemos.view.widgets.color_button import ColorButton

logger = logging.getLogger(__name__)


class KleinControlPanel(QWidget):
    # Emitted after an accepted change, carrying the Refresh level
    changed = Signal(int)

    def __init__(self, demo: KleinBottleDemo) -> None:
        super().__init__()
        self.demo = demo

        layout = QVBoxLayout(self)

        # --- Surface Group ---
        grp = QGroupBox("Surface")
        form = QFormLayout(grp)

        self.color_btn = ColorButton(demo.settings.color)
        self.color_btn.color_changed.connect(lambda c: self._apply(self.demo.set_color, c))
        form.addRow("Color:", self.color_btn)

        self.opacity_spin = QDoubleSpinBox()
        self.opacity_spin.setRange(0.0, 1.0)
        self.opacity_spin.setSingleStep(0.05)
        self.opacity_spin.valueChanged.connect(lambda v: self._apply(self.demo.set_opacity, v))
        form.addRow("Opacity:", self.opacity_spin)

        layout.addWidget(grp)

        # --- Ball Group ---
        grp_ball = QGroupBox("Ball")
        form_ball = QFormLayout(grp_ball)

        self.chk_ball = QCheckBox("")
        self.chk_ball.toggled.connect(lambda on: self._apply(self.demo.set_ball_visible, on))
        form_ball.addRow("Show ball:", self.chk_ball)

        self.v_spin = QDoubleSpinBox()
        self.v_spin.setRange(*KLEIN_V_RANGE)
        self.v_spin.setSingleStep(KLEIN_V_STEP)
        self.v_spin.setDecimals(1)
        self.v_spin.valueChanged.connect(lambda v: self._apply(self.demo.set_v, v))
        form_ball.addRow("Start v:", self.v_spin)

        layout.addWidget(grp_ball)

        # --- Status Info ---
        self.lbl_status = QLabel("")
        self.lbl_status.setAlignment(Qt.AlignCenter)
        self.lbl_status.setWordWrap(True)
        self.lbl_status.setStyleSheet("color: #b00020;")
        layout.addWidget(self.lbl_status)

        layout.addStretch()

        self.load_from_state()

    def load_from_state(self) -> None:
        """Sync widgets with the demo settings without re-triggering changes."""
        s = self.demo.settings
        widgets = (self.color_btn, self.opacity_spin, self.chk_ball, self.v_spin)
        for w in widgets:
            w.blockSignals(True)
        try:
            self.color_btn.set_color(s.color)
            self.opacity_spin.setValue(s.opacity)
            self.chk_ball.setChecked(s.show_ball)
            self.v_spin.setValue(s.v)
        finally:
            for w in widgets:
                w.blockSignals(False)

    def _apply(self, setter, value) -> None:
        try:
            refresh: Refresh = setter(value)
        except InvalidParameterError as e:
            self.lbl_status.setText(str(e))
            self.load_from_state()
            return
        self.lbl_status.setText("")
        self.changed.emit(int(refresh))
