"""
Parametric Surfaces
===================
Maps the unit square onto 3D surfaces and samples them into meshes.

Functions:
    klein_bottle: Dickson bottle immersion of the Klein bottle.
    parametric_mesh: Samples any such surface into a PyVista surface mesh.
"""
from __future__ import annotations

import logging
from typing import Callable, TYPE_CHECKING

import numpy as np
import pyvista as pv

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

SurfaceFunction = Callable[["npt.ArrayLike", "npt.ArrayLike"], "npt.NDArray[np.float64]"]

# Shape constants of the Dickson bottle
KLEIN_A: float = 6.0
KLEIN_B: float = 4.0
KLEIN_C: float = 16.0


def klein_bottle(u: npt.ArrayLike, v: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """
    Dickson bottle (see 'The Klein Bottle: Variations on a Theme', G. Franzoni).

    The two halves ``u < 0.5`` and ``u >= 0.5`` use different formulas; the
    second one closes the tube with reversed orientation, which is what makes
    the surface a Klein bottle. The seam at ``u = 0`` identifies
    ``(1, v)`` with ``(0, 0.5 - v)``.

    Args:
        u, v: Parameters in [0, 1). Scalars or arrays of the same shape.

    Returns:
        Points with shape ``(..., 3)``.
    """
    up = 2.0 * np.pi * np.asarray(u, dtype=np.float64)
    vp = 2.0 * np.pi * np.asarray(v, dtype=np.float64)
    cosu, sinu = np.cos(up), np.sin(up)
    cosv, sinv = np.cos(vp), np.sin(vp)
    ru = KLEIN_B * (1.0 - cosu / 2.0)

    first_half = up < np.pi
    x = np.where(
        first_half,
        KLEIN_A * cosu * (1.0 + sinu) + ru * cosu * cosv,
        KLEIN_A * cosu * (1.0 + sinu) + ru * np.cos(vp + np.pi),
    )
    y = np.where(
        first_half,
        KLEIN_C * sinu + ru * sinu * cosv,
        KLEIN_C * sinu,
    )
    z = ru * sinv
    return np.stack([x, y, z], axis=-1)


def parametric_mesh(
    f: SurfaceFunction,
    u_segments: int,
    v_segments: int,
) -> pv.PolyData:
    """
    Sample ``f`` on a regular grid over [0, 1] x [0, 1].

    Equivalent to a (u_segments x v_segments) quad grid; both edges of the
    domain are included so the seams close visually.
    """
    if u_segments < 1 or v_segments < 1:
        raise ValueError(f"Segments must be positive, got ({u_segments}, {v_segments}).")

    uu, vv = np.meshgrid(
        np.linspace(0.0, 1.0, u_segments + 1),
        np.linspace(0.0, 1.0, v_segments + 1),
        indexing="ij",
    )
    points = f(uu, vv).reshape(-1, 3)

    # One quad per grid cell; point (i, j) sits at index i * (v_segments + 1) + j
    ii, jj = np.meshgrid(np.arange(u_segments), np.arange(v_segments), indexing="ij")
    corner = (ii * (v_segments + 1) + jj).ravel()
    faces = np.column_stack([
        np.full_like(corner, 4),
        corner,
        corner + v_segments + 1,
        corner + v_segments + 2,
        corner + 1,
    ]).ravel()
    surface = pv.PolyData(points, faces=faces)
    logger.debug(f"Sampled parametric surface: {surface.n_points} points, {surface.n_cells} cells.")
    return surface
