"""
Klein Bottle Demo
=================
A translucent Dickson bottle with a ball that rolls around it.

The ball advances along ``u`` at constant parameter speed. Each time it
passes the ``u = 1 -> 0`` seam it comes out on the other side of the surface,
which is only visible because the ball is offset along the (flipping) normal.
"""
from __future__ import annotations

import logging

from geomdemos.config import (
    BALL_COLOR, BALL_DIRECTION, BALL_RADIUS, BALL_SPEED, BALL_START, CAMERA_VIEW_ANGLE, KLEIN_AXES_LENGTH,
    KLEIN_CAMERA_DISTANCE, KLEIN_SEGMENTS, NORMAL_EPSILON
)
from geomdemos.controller.base import Demo, Refresh
from geomdemos.errors import InvalidParameterError
from geomdemos.model.layouts import sphere_geometry
from geomdemos.model.materials import Material, Side
from geomdemos.model.scene import CameraSetup, Mesh, PointLight, SceneNode
from geomdemos.model.state import KleinSettings
from geomdemos.model.surfaces import klein_bottle, parametric_mesh
from geomdemos.model.walker import MovingObject, SurfaceWalker

logger = logging.getLogger(__name__)


class KleinBottleDemo(Demo):
    TITLE = "Klein bottle"

    def __init__(self, segments: tuple[int, int] = KLEIN_SEGMENTS) -> None:
        super().__init__()
        self.settings = KleinSettings()
        self.segments = segments

        self.lights = [
            PointLight(position=(20.0, 0.0, 0.0)),
            PointLight(position=(-10.0, -20.0, 20.0)),
            PointLight(position=(-10.0, 20.0, -20.0)),
        ]
        self.camera = CameraSetup(position=(0.0, 0.0, KLEIN_CAMERA_DISTANCE), view_angle=CAMERA_VIEW_ANGLE)
        self.axes_length = KLEIN_AXES_LENGTH

        # Front and back faces get separate materials so both sides shade correctly
        self.front_material = Material(side=Side.FRONT, shininess=50.0)
        self.back_material = Material(side=Side.BACK, shininess=50.0)
        self.klein = self._make_klein()
        self.root.add(self.klein)

        self.ball_node = Mesh(sphere_geometry(BALL_RADIUS), Material(color=BALL_COLOR), name="ball")
        self.ball_node.dynamic = True
        self.ball = MovingObject(
            walker=SurfaceWalker(klein_bottle, epsilon=NORMAL_EPSILON, is_klein=True),
            position=BALL_START,
            direction=BALL_DIRECTION,
            pps=BALL_SPEED,
            offset=BALL_RADIUS,
            node=self.ball_node,
        )
        self._apply_appearance()
        self._sync_ball()

    def _make_klein(self) -> SceneNode:
        geometry = parametric_mesh(klein_bottle, *self.segments)
        klein = SceneNode(name="klein")
        klein.add(
            Mesh(geometry, self.front_material, name="klein front"),
            Mesh(geometry, self.back_material, name="klein back"),
        )
        return klein

    def _apply_appearance(self) -> None:
        for material in (self.front_material, self.back_material):
            material.color = self.settings.color
            material.opacity = self.settings.opacity

    def _sync_ball(self) -> None:
        """Place the ball at (current u, settings.v) and show/hide it."""
        self.ball.set_position(self.ball.u, self.settings.v)
        self.ball.walker.step(self.ball, 0.0)
        if self.settings.show_ball:
            self.subject.register(self.ball)
            self.root.add(self.ball_node)
        else:
            self.root.remove(self.ball_node)
            self.subject.unregister(self.ball)

    def _update(self, **changes) -> KleinSettings:
        candidate = KleinSettings(**{**self.settings.__dict__, **changes})
        try:
            candidate.validate()
        except InvalidParameterError as e:
            logger.warning(f"Rejected Klein bottle settings change: {e}")
            raise
        self.settings = candidate
        return candidate

    # --- public API (called from the control panel) ---

    def set_color(self, color: str) -> Refresh:
        self._update(color=color)
        self._apply_appearance()
        return Refresh.MATERIALS

    def set_opacity(self, opacity: float) -> Refresh:
        self._update(opacity=opacity)
        self._apply_appearance()
        return Refresh.MATERIALS

    def set_ball_visible(self, visible: bool) -> Refresh:
        self._update(show_ball=visible)
        self._sync_ball()
        logger.info(f"Ball {'shown' if visible else 'hidden'}.")
        return Refresh.SCENE

    def set_v(self, v: float) -> Refresh:
        self._update(v=v)
        self._sync_ball()
        return Refresh.SCENE
