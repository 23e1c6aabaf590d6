from __future__ import annotations

from enum import IntEnum
from typing import Optional

from geomdemos.model.notifications import Subject
from geomdemos.model.scene import CameraSetup, PointLight, SceneNode


class Refresh(IntEnum):
    """How much of the rendered scene a change invalidates (ordered)."""
    NONE = 0
    MATERIALS = 1  # colours / opacity of existing actors
    SCENE = 2  # tree structure or static transforms; actors must be rebuilt


class Demo:
    """Base class of the demos: a scene root plus its lighting and camera."""
    TITLE: str = "Demo"

    def __init__(self) -> None:
        self.root = SceneNode(name=self.TITLE)
        self.subject = Subject()
        self.lights: list[PointLight] = []
        self.ambient: float = 0.13
        self.camera = CameraSetup(position=(0.0, 0.0, 10.0))
        self.axes_length: Optional[float] = None

    @property
    def is_animated(self) -> bool:
        return len(self.subject) > 0

    def tick(self, delta: float) -> None:
        """Advance every animated object by ``delta`` seconds."""
        self.subject.notify(delta)
