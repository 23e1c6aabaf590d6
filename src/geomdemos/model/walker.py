"""
Surface Walker
==============
Moves an object across a parametric surface at constant parameter speed,
keeping it a fixed distance above the surface along the local normal.

Why is this file needed?
------------------------
1. Topology: The parameter domain is the unit square glued into a torus or a
   Klein bottle. Crossing ``v = 1`` is a plain periodic wrap. Crossing
   ``u = 1`` on a Klein bottle re-enters with ``v -> 0.5 - v`` and with the
   surface normal reversed, so each object tracks its own normal sign.
2. Placement: The normal is estimated by finite differences so any surface
   function can be used without analytic derivatives.

Classes:
    SurfaceWalker: Advances a MovingObject by a time delta.
    MovingObject: Parametric state of a tracked scene node.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional, TYPE_CHECKING

import numpy as np

from geomdemos.config import NORMAL_EPSILON
from geomdemos.model.scene import SceneNode
from geomdemos.model.surfaces import SurfaceFunction

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class SurfaceWalker:
    """
    Steps objects over a surface ``f(u, v)``.

    Args:
        surface: Parametric surface function.
        epsilon: Parameter offset used for the finite-difference tangents.
        is_klein: Apply the Klein bottle stitch on the ``u`` seam. When False
            the domain is treated as a torus.
    """
    def __init__(self, surface: SurfaceFunction, epsilon: float = NORMAL_EPSILON, is_klein: bool = True) -> None:
        self.surface = surface
        self.epsilon = epsilon
        self.is_klein = is_klein

    def step(self, obj: MovingObject, delta: float) -> npt.NDArray[np.float64]:
        """
        Advance ``obj`` by ``delta`` seconds.

        Updates ``obj.position`` and ``obj.normal_sign`` and, if the object
        has a node, moves the node. Returns the new world position.
        """
        u, v = obj.position + obj.direction * (delta * obj.pps)

        # Torus wraparound along v (orientable)
        while v >= 1.0:
            v -= 1.0
        while v < 0.0:
            v += 1.0

        # Seam along u
        while u >= 1.0:
            u -= 1.0
            v = self._cross_seam(obj, v)
        while u < 0.0:
            u += 1.0
            v = self._cross_seam(obj, v)

        obj.position = np.array([u, v])
        world = self.offset_point(u, v, obj.normal_sign * obj.offset)
        if obj.node is not None:
            obj.node.position[:] = world
        return world

    def _cross_seam(self, obj: MovingObject, v: float) -> float:
        if not self.is_klein:
            return v
        # Need v' with cos(v'p) = cos(vp + pi) and sin(v'p) = sin(vp)
        v = 0.5 - v
        if v <= 0.0:
            v += 1.0
        obj.normal_sign *= -1
        logger.debug(f"Crossed Klein seam: v -> {v:.4f}, normal sign {obj.normal_sign:+d}.")
        return v

    def normal(self, u: float, v: float) -> npt.NDArray[np.float64]:
        """Unit normal at ``(u, v)``; zero where the tangents are degenerate."""
        p = self.surface(u, v)
        du = self.surface(min(1.0, u + self.epsilon), v) - p
        dv = self.surface(u, min(1.0, v + self.epsilon)) - p
        n = np.cross(du, dv)
        length = np.linalg.norm(n)
        if length == 0.0:
            return n
        return n / length

    def offset_point(self, u: float, v: float, distance: float) -> npt.NDArray[np.float64]:
        """Surface point at ``(u, v)`` pushed ``distance`` along the normal."""
        return self.surface(u, v) + self.normal(u, v) * distance


@dataclass(eq=False)
class MovingObject:
    """
    An object that travels over a surface.

    ``advance(delta)`` makes it usable as a subscriber of
    :class:`geomdemos.model.notifications.Subject`.
    """
    walker: SurfaceWalker
    position: npt.NDArray[np.float64] = field(default_factory=lambda: np.array([0.0, 0.5]))
    direction: npt.NDArray[np.float64] = field(default_factory=lambda: np.array([1.0, 0.0]))
    pps: float = 0.07  # parameter units per second
    offset: float = 0.5
    normal_sign: int = 1
    node: Optional[SceneNode] = None

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64)
        direction = np.asarray(self.direction, dtype=np.float64)
        norm = np.linalg.norm(direction)
        if norm == 0.0:
            raise ValueError("Direction must be a non-zero vector.")
        self.direction = direction / norm

    @property
    def u(self) -> float:
        return float(self.position[0])

    @property
    def v(self) -> float:
        return float(self.position[1])

    def set_position(self, u: float, v: float) -> None:
        self.position = np.array([u, v], dtype=np.float64)

    def advance(self, delta: float) -> None:
        self.walker.step(self, delta)
