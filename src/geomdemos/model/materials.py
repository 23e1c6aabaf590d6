"""Surface appearance attached to scene meshes."""
from __future__ import annotations

import colorsys
from dataclasses import dataclass
from enum import StrEnum

from geomdemos.config import DEFAULT_SHININESS


class Side(StrEnum):
    """Which faces of a mesh are drawn."""
    FRONT = "front"
    BACK = "back"
    DOUBLE = "double"


@dataclass(eq=False)
class Material:
    """
    Phong-like material.

    Compared by identity: a single instance shared between many meshes is
    recoloured for all of them at once.
    """
    color: str = "#ffffff"
    opacity: float = 1.0
    shininess: float = DEFAULT_SHININESS
    side: Side = Side.FRONT

    @property
    def culling(self) -> str | None:
        """Face culling mode understood by ``pyvista.Plotter.add_mesh``."""
        match self.side:
            case Side.FRONT:
                return "back"
            case Side.BACK:
                return "front"
            case _:
                return None


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSL components in [0, 1] to a '#rrggbb' string."""
    r, g, b = colorsys.hls_to_rgb(h % 1.0, l, s)
    return "#{:02x}{:02x}{:02x}".format(round(r * 255), round(g * 255), round(b * 255))


def digit_material(i: int, base: int) -> Material:
    """Material whose hue encodes digit ``i`` out of ``base``."""
    return Material(color=hsl_to_hex(i / base, 1.0, 0.5))
