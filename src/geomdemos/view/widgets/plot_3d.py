"""
3D Visualization Widget (PyVista Wrapper) - Scene Graph Rendering
"""

from __future__ import annotations

from typing import Optional
from dataclasses import dataclass, field

import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QFrame, QStyle
)
from PySide6.QtGui import QCloseEvent, QResizeEvent

from pyvistaqt import QtInteractor
import pyvista as pv

from geomdemos.controller.base import Demo
from geomdemos.model.materials import Material
from geomdemos.model.scene import Mesh, iter_meshes

logger = logging.getLogger(__name__)

# --- DATA CLASSES FOR VISUALIZATION ---

@dataclass
class MaterialBatch:
    """All static meshes sharing one material, merged into a single actor."""
    material: Material
    blocks: list[pv.PolyData] = field(default_factory=list)
    actor: Optional[pv.Actor] = None

# --- WIDGET CLASS ---

class PyVistaWidget(QWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._init_plotter()

        # --- Actors state ---
        self._demo: Optional[Demo] = None
        self._batches: list[MaterialBatch] = []
        # Meshes that move every frame: one actor each, updated via user_matrix
        self._dynamic_actors: dict[int, tuple[Mesh, pv.Actor]] = {}
        self._axes_actors: list[pv.Actor] = []

        # --- Visibility state ---
        self._visible_axes: bool = True

        self._setup_overlay_controls()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def show_demo(self, demo: Demo, reset_camera: bool = True) -> None:
        """
        Replaces everything in the view with the scene of ``demo``:
        1. Lights and axes
        2. Static meshes (batched per material)
        3. Dynamic meshes (individual actors)
        """
        logger.info(f"Showing demo '{demo.TITLE}'.")
        self._demo = demo
        self._setup_lights(demo)
        self._update_axes(demo.axes_length)
        self.rebuild_scene(render=False)
        if reset_camera:
            self._apply_camera(demo)
        self.plotter.render()

    def rebuild_scene(self, render: bool = True) -> None:
        """Re-creates all mesh actors from the current scene graph."""
        if self._demo is None:
            return
        self._clear_scene_actors()

        batches: dict[int, MaterialBatch] = {}
        for mesh, matrix, dynamic in iter_meshes(self._demo.root):
            if dynamic:
                actor = self._add_actor(mesh.geometry, mesh.material)
                actor.user_matrix = matrix
                self._dynamic_actors[id(mesh)] = (mesh, actor)
                continue
            batch = batches.setdefault(id(mesh.material), MaterialBatch(mesh.material))
            batch.blocks.append(mesh.geometry.transform(matrix, inplace=False))

        for batch in batches.values():
            merged = batch.blocks[0] if len(batch.blocks) == 1 else pv.merge(batch.blocks, merge_points=False)
            batch.actor = self._add_actor(merged, batch.material)
            batch.blocks.clear()
            self._batches.append(batch)

        logger.debug(f"Scene rebuilt: {len(self._batches)} batched actors, {len(self._dynamic_actors)} dynamic actors.")
        if render:
            self.plotter.render()

    def refresh_transforms(self, render: bool = True) -> None:
        """Pushes the world transforms of dynamic meshes to their actors."""
        if self._demo is None or not self._dynamic_actors:
            return
        for mesh, matrix, dynamic in iter_meshes(self._demo.root):
            entry = self._dynamic_actors.get(id(mesh))
            if entry is not None:
                entry[1].user_matrix = matrix
        if render:
            self.plotter.render()

    def refresh_materials(self, render: bool = True) -> None:
        """Pushes material colour/opacity changes to existing actors."""
        actors: list[tuple[Material, pv.Actor]] = [(b.material, b.actor) for b in self._batches if b.actor]
        actors += [(mesh.material, actor) for mesh, actor in self._dynamic_actors.values()]
        for material, actor in actors:
            actor.prop.color = material.color
            actor.prop.opacity = material.opacity
        if render:
            self.plotter.render()

    def set_axes_visible(self, visible: bool, render: bool = True) -> None:
        """
        Public slot to toggle the axes helper.
        Args:
            visible: True to show, False to hide.
            render: If True, triggers a re-render immediately. Set False for batch updates.
        """
        self._visible_axes = visible
        if self.btn_vis_axes.isChecked() != visible:
            self.btn_vis_axes.blockSignals(True)
            self.btn_vis_axes.setChecked(visible)
            self.btn_vis_axes.blockSignals(False)

        for actor in self._axes_actors:
            actor.SetVisibility(visible)
        if render:
            self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal: Actor Management
    # ------------------------------------------------------------------------------

    def _add_actor(self, geometry: pv.PolyData, material: Material) -> pv.Actor:
        return self.plotter.add_mesh(
            geometry,
            color=material.color,
            opacity=material.opacity,
            smooth_shading=True,
            specular=0.5,
            specular_power=material.shininess,
            ambient=self._demo.ambient if self._demo else 0.0,
            culling=material.culling,
            pickable=False,
            show_scalar_bar=False,
            reset_camera=False,
        )

    def _clear_scene_actors(self) -> None:
        for batch in self._batches:
            if batch.actor:
                self.plotter.remove_actor(batch.actor, render=False)
        self._batches.clear()
        for _, actor in self._dynamic_actors.values():
            self.plotter.remove_actor(actor, render=False)
        self._dynamic_actors.clear()

    def _setup_lights(self, demo: Demo) -> None:
        self.plotter.remove_all_lights()
        for light_def in demo.lights:
            light = pv.Light(position=light_def.position, focal_point=(0.0, 0.0, 0.0), color=light_def.color,
                             intensity=light_def.intensity, light_type="scene light")
            self.plotter.add_light(light)

    def _update_axes(self, length: Optional[float]) -> None:
        """Axes helper: x red, y green, z blue."""
        for actor in self._axes_actors:
            self.plotter.remove_actor(actor, render=False)
        self._axes_actors.clear()
        if length is None:
            return
        origin = (0.0, 0.0, 0.0)
        for tip, color in (((length, 0.0, 0.0), "red"), ((0.0, length, 0.0), "green"), ((0.0, 0.0, length), "blue")):
            actor = self.plotter.add_mesh(
                pv.Line(origin, tip),
                color=color,
                line_width=2,
                lighting=False,
                pickable=False,
                reset_camera=False,
            )
            actor.SetVisibility(self._visible_axes)
            self._axes_actors.append(actor)

    def _apply_camera(self, demo: Demo) -> None:
        cam = demo.camera
        self.plotter.camera_position = [cam.position, cam.focal_point, cam.view_up]
        self.plotter.camera.view_angle = cam.view_angle
        self.plotter.renderer.reset_camera_clipping_range()

    def _init_plotter(self) -> None:
        self.plotter.set_background("black")
        self.plotter.enable_trackball_style()

    def _setup_overlay_controls(self) -> None:
        """Floating toggle buttons."""
        self.overlay_widget = QFrame(self)
        self.overlay_widget.setStyleSheet("""
            QFrame { background-color: rgba(255, 255, 255, 200); border-radius: 6px; border: 1px solid #ccc; }
            QPushButton { background-color: transparent; border: none; padding: 4px; }
            QPushButton:checked { background-color: rgba(0, 120, 215, 50); border: 1px solid #0078D7; border-radius: 3px; }
            QPushButton:hover { background-color: rgba(0, 0, 0, 10); }
        """)

        layout = QHBoxLayout(self.overlay_widget)
        layout.setContentsMargins(4, 4, 4, 4)

        def make_btn(icon, slot, tooltip, checkable=True, default_state=True):
            btn = QPushButton()
            btn.setIcon(self.style().standardIcon(icon))
            btn.setCheckable(checkable)
            if checkable:
                btn.setChecked(default_state)
                btn.toggled.connect(slot)
            else:
                btn.clicked.connect(slot)
            btn.setToolTip(tooltip)
            layout.addWidget(btn)
            return btn

        self.btn_vis_axes = make_btn(QStyle.SP_FileDialogListView, self.on_toggle_axes, "Show axes")
        self.btn_reset_cam = make_btn(QStyle.SP_BrowserReload, self.on_reset_camera, "Reset camera", checkable=False)

        self._visible_axes = self.btn_vis_axes.isChecked()
        self.overlay_widget.adjustSize()

    # --- Slots ---
    def on_toggle_axes(self, checked: bool) -> None:
        self.set_axes_visible(checked)

    def on_reset_camera(self) -> None:
        if self._demo is not None:
            self._apply_camera(self._demo)
            self.plotter.render()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        margin = 8
        self.overlay_widget.move(self.width() - self.overlay_widget.width() - margin, margin)
        self.overlay_widget.raise_()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.plotter.close()
        event.accept()
