"""
Main Application Window
=======================
The primary GUI container that holds the demo tabs, the control panels and
the shared 3D view.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects panel changes to the 3D view and runs the animation
   loop (one tick per frame: advance the active demo, then render).
"""
import logging
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QTabBar, QStackedWidget
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction

from geomdemos.config import FRAME_INTERVAL_MS, VISIBLE_APP_NAME
from geomdemos.controller.base import Demo, Refresh
from geomdemos.controller.clock import Clock
from geomdemos.controller.klein_demo import KleinBottleDemo
from geomdemos.controller.string_demo import StringSystemDemo
from geomdemos.view.tabs.tab_klein import KleinControlPanel
from geomdemos.view.tabs.tab_strings import StringSystemControlPanel
from geomdemos.view.widgets.plot_3d import PyVistaWidget

logger = logging.getLogger(__name__)

DEMO_KEYS = ["klein", "strings"]


class MainWindow(QMainWindow):
    def __init__(self, initial_demo: str = "klein") -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- DEMOS ---
        self.demos: list[Demo] = [KleinBottleDemo(), StringSystemDemo()]

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)

        main_layout = QVBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # --- 1. TOP TAB BAR ---
        self.tab_bar = QTabBar()
        self.tab_bar.setDrawBase(True)
        self.tab_bar.setShape(QTabBar.RoundedNorth)
        self.tab_bar.setExpanding(True)
        for demo in self.demos:
            self.tab_bar.addTab(demo.TITLE)
        self.tab_bar.setStyleSheet("""
                    QTabBar::tab { height: 35px; min-width: 100px; }
                    QTabBar::tab:selected { font-weight: bold; }
                """)
        main_layout.addWidget(self.tab_bar)

        # --- 2. SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Horizontal)
        main_layout.addWidget(splitter)

        # --- LEFT SIDE: Control Panels (Stacked) ---
        self.controls_stack = QStackedWidget()
        self.klein_panel = KleinControlPanel(self.demos[0])
        self.strings_panel = StringSystemControlPanel(self.demos[1])
        # Order must match Tab Bar order
        self.controls_stack.addWidget(self.klein_panel)
        self.controls_stack.addWidget(self.strings_panel)
        splitter.addWidget(self.controls_stack)

        # --- RIGHT SIDE: Shared 3D Visualization ---
        self.visualizer = PyVistaWidget()
        splitter.addWidget(self.visualizer)
        splitter.setSizes([300, 1100])

        # --- SIGNAL CONNECTIONS ---
        self.tab_bar.currentChanged.connect(self.on_tab_changed)
        self.klein_panel.changed.connect(self.on_demo_changed)
        self.strings_panel.changed.connect(self.on_demo_changed)

        self._create_menus()

        # --- ANIMATION LOOP ---
        self.clock = Clock()
        self.timer = QTimer(self)
        self.timer.setInterval(FRAME_INTERVAL_MS)
        self.timer.timeout.connect(self.on_tick)

        start = DEMO_KEYS.index(initial_demo) if initial_demo in DEMO_KEYS else 0
        self.tab_bar.setCurrentIndex(start)
        if start == 0:
            # setCurrentIndex(0) on a fresh tab bar emits nothing
            self.on_tab_changed(0)
        self.timer.start()

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()
        view_menu = menu_bar.addMenu("&View")

        self.act_reset_camera = QAction("Reset Camera", self)
        self.act_reset_camera.setShortcut("Ctrl+R")
        self.act_reset_camera.triggered.connect(self.visualizer.on_reset_camera)
        view_menu.addAction(self.act_reset_camera)

        self.act_pause = QAction("Pause Animation", self)
        self.act_pause.setCheckable(True)
        self.act_pause.setShortcut("Space")
        self.act_pause.toggled.connect(self.on_pause_toggled)
        view_menu.addAction(self.act_pause)

        view_menu.addSeparator()
        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)
        view_menu.addAction(self.act_exit)

    # --- HELPER METHODS ---
    @property
    def current_demo(self) -> Optional[Demo]:
        idx = self.tab_bar.currentIndex()
        return self.demos[idx] if 0 <= idx < len(self.demos) else None

    # --- SLOTS ---
    def on_tab_changed(self, idx: int) -> None:
        self.controls_stack.setCurrentIndex(idx)
        self.visualizer.show_demo(self.demos[idx])
        self.clock.reset()

    def on_demo_changed(self, refresh: int) -> None:
        """Slot called when a control panel accepted a change."""
        if refresh >= Refresh.SCENE:
            self.visualizer.rebuild_scene()
        elif refresh >= Refresh.MATERIALS:
            self.visualizer.refresh_materials()

    def on_pause_toggled(self, paused: bool) -> None:
        if paused:
            self.timer.stop()
        else:
            self.clock.reset()
            self.timer.start()

    def on_tick(self) -> None:
        delta = self.clock.get_delta()
        demo = self.current_demo
        if demo is None or not demo.is_animated:
            return
        demo.tick(delta)
        self.visualizer.refresh_transforms()

    def closeEvent(self, event, /) -> None:
        """Stop the animation loop and close the PyVista plotter safely."""
        self.timer.stop()
        if self.visualizer and self.visualizer.plotter:
            self.visualizer.plotter.close()
        event.accept()
