"""
String System Demo
==================
Builds the digit-expansion tree selected in the control panel and swaps it
into the scene.

Every accepted change rebuilds the whole tree; the new tree replaces the old
one in a single step so a half-built system is never visible.
"""
from __future__ import annotations

import logging
from typing import Optional

from geomdemos.config import CAMERA_VIEW_ANGLE, STRINGS_CAMERA_DISTANCE
from geomdemos.controller.base import Demo, Refresh
from geomdemos.errors import InvalidParameterError
from geomdemos.model.layouts import create_layout
from geomdemos.model.materials import Material
from geomdemos.model.scene import CameraSetup, PointLight, SceneNode
from geomdemos.model.state import StringSystemSettings
from geomdemos.model.string_system import build_string_system

logger = logging.getLogger(__name__)


class StringSystemDemo(Demo):
    TITLE = "String systems"

    def __init__(self, settings: Optional[StringSystemSettings] = None) -> None:
        super().__init__()
        self.lights = [
            PointLight(position=(10.0, 20.0, 20.0)),
            PointLight(position=(-10.0, -20.0, -20.0)),
        ]
        self.camera = CameraSetup(position=(0.0, 0.0, STRINGS_CAMERA_DISTANCE), view_angle=CAMERA_VIEW_ANGLE)

        self.settings = settings or StringSystemSettings()
        self.settings.validate()
        # Shared by every unit in one-colour mode
        self.shared_material = Material(color=self.settings.color)
        self.system: Optional[SceneNode] = None
        self.rebuild()

    def rebuild(self) -> None:
        s = self.settings
        layout = create_layout(s.model)
        material = self.shared_material if s.one_color else None
        system = build_string_system(s.n, s.base, layout, s.include_set(), material=material)

        self.root.children = [system]
        self.system = system
        logger.info(f"String system '{s.model}' rebuilt: n={s.n}, base={s.base}, digits={s.include_set()}.")

    def apply(self, **changes) -> Refresh:
        """
        Validate and apply settings changes.

        Raises:
            InvalidParameterError: The change is rejected and the current
                settings and tree are kept.
        """
        try:
            candidate = self.settings.with_changes(**changes)
            candidate.validate()
        except InvalidParameterError as e:
            logger.warning(f"Rejected string system settings change {changes}: {e}")
            raise

        previous = self.settings
        self.settings = candidate
        self.shared_material.color = candidate.color

        if set(changes) <= {"color"}:
            # Only the shared material depends on the colour
            return Refresh.MATERIALS if candidate.one_color else Refresh.NONE

        try:
            self.rebuild()
        except InvalidParameterError:
            self.settings = previous
            self.shared_material.color = previous.color
            raise
        return Refresh.SCENE

    def set_digit(self, i: int, enabled: bool) -> Refresh:
        if not 0 <= i < self.settings.base:
            raise InvalidParameterError("digit", i, f"must lie in [0, {self.settings.base})")
        digits = list(self.settings.digits)
        digits[i] = enabled
        return self.apply(digits=digits)
