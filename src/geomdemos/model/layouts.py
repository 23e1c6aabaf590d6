"""
Digit Layout Catalog
====================
Geometric arrangements used by the string-system builder.

Each layout provides two factories that must agree with each other:

* ``digits_graph`` lays out one unit (key, box, square, disk, sphere) per
  active digit.
* ``transformer`` wraps a child string system in a frame that places and
  scales it into the slot of digit ``i``, so that every recursion level
  nests inside the unit it refines.

Layouts register themselves by ``KEY`` with :func:`register_layout`.
"""
from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
import logging
import math
from typing import Iterable, Optional

import numpy as np
import pyvista as pv

from geomdemos.errors import InvalidParameterError
from geomdemos.model.materials import Material, digit_material
from geomdemos.model.scene import Mesh, SceneNode

logger = logging.getLogger(__name__)

# Keeps zero-height (digit 0) units from degenerating
EPSILON: float = 0.0001
TWO_PI: float = 2.0 * math.pi


class LayoutKey(StrEnum):
    KEYBOARD = "keyboard"
    KEYBOARD_LENGTHENED = "keyboard lengthened"
    KEYBOARD_LOFTED = "keyboard lofted"
    BOXES = "boxes"
    BOXES_LOFTED = "boxes lofted"
    SQUARES = "squares"
    SQUARES_LOFTED = "squares lofted"
    DISKS = "disks"
    DISKS_LOFTED = "disks lofted"
    SPHERES = "spheres"


# ------------------------------------------------------------------------------
# Shared geometry (treated as immutable once created)
# ------------------------------------------------------------------------------

@lru_cache(maxsize=None)
def box_geometry(width: float, height: float, depth: float) -> pv.PolyData:
    """Box centred on the origin; width along x, height along y, depth along z."""
    return pv.Box(bounds=(-width / 2, width / 2, -height / 2, height / 2, -depth / 2, depth / 2))


@lru_cache(maxsize=None)
def cylinder_geometry(radius: float, height: float) -> pv.PolyData:
    """Upright (y-axis) cylinder centred on the origin."""
    return pv.Cylinder(center=(0.0, 0.0, 0.0), direction=(0.0, 1.0, 0.0), radius=radius, height=height, resolution=24)


@lru_cache(maxsize=None)
def sphere_geometry(radius: float) -> pv.PolyData:
    return pv.Sphere(radius=radius, theta_resolution=24, phi_resolution=24)


# ------------------------------------------------------------------------------
# Base class
# ------------------------------------------------------------------------------

class DigitLayout:
    """Base class for digit layouts."""
    KEY: str = "base"  # Override in subclass
    max_base: Optional[int] = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.KEY!r})"

    def digits_graph(self, base: int, include: Iterable[int], material: Optional[Material] = None) -> SceneNode:
        """
        One unit per digit in ``include``.

        Args:
            base: Number base; sets the spacing and the hue of each digit.
            include: Active digits.
            material: Shared material for every unit. When None each unit
                gets its own colour ``hsl(i / base, 1, 0.5)``.
        """
        root = SceneNode(name=f"{self.KEY} digits")
        for i in sorted(include):
            unit = self.make_unit(i, base, material or digit_material(i, base))
            unit.digit = i
            root.add(unit)
        return root

    def wrap(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        """``transformer`` plus bookkeeping of the digit on the returned frame."""
        frame = self.transformer(i, base, child, depth)
        frame.digit = i
        return frame

    # ---- abstract API for subclasses ----

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        """Return the placed unit for digit ``i``."""
        raise NotImplementedError("`make_unit` must be implemented in subclass.")

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        """Return ``child`` placed into the slot of digit ``i``."""
        raise NotImplementedError("`transformer` must be implemented in subclass.")


_REGISTRY: dict[str, type[DigitLayout]] = {}


def register_layout(cls: type[DigitLayout]) -> type[DigitLayout]:
    """Class decorator to register a layout by its KEY."""
    key = getattr(cls, "KEY", None)
    if not key or key == DigitLayout.KEY:
        raise ValueError(f"{cls.__name__} must define KEY")
    _REGISTRY[key] = cls
    return cls


def create_layout(key: str) -> DigitLayout:
    cls = _REGISTRY.get(key)
    if not cls:
        raise InvalidParameterError("model", key, f"unknown layout, expected one of {list_layouts()}")
    return cls()


def list_layouts() -> list[str]:
    return list(_REGISTRY.keys())


# ------------------------------------------------------------------------------
# Keyboards: keys side by side along z, each level grows along +x
# ------------------------------------------------------------------------------

KEY_LENGTH = 1.0  # along x
KEY_WIDTH = 1.0  # along z; keyboard is KEY_WIDTH * base wide
KEY_DEPTH = 0.25  # along y
LOFT_DEPTH = 2 * KEY_DEPTH  # height gained per digit value when lofted


def _key_z(i: int, base: int) -> float:
    return -0.5 * (base - 1) * KEY_WIDTH + i * KEY_WIDTH


@register_layout
class KeyboardLayout(DigitLayout):
    KEY = LayoutKey.KEYBOARD

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        mesh = Mesh(box_geometry(KEY_LENGTH, KEY_DEPTH, KEY_WIDTH), material, name=f"key {i}")
        mesh.set_position(0.0, 0.5 * KEY_DEPTH, _key_z(i, base))
        return mesh

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        root = SceneNode(name=f"slot {i}")
        root.set_position(KEY_LENGTH, 0.0, _key_z(i, base))
        root.set_scale(1.0, 1.0, 1.0 / base)
        root.add(child)
        return root


@register_layout
class KeyboardLengthenedLayout(DigitLayout):
    """Key ``i`` is ``i`` units long; the child keyboard starts at its end."""
    KEY = LayoutKey.KEYBOARD_LENGTHENED

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        length = KEY_LENGTH * i + EPSILON
        mesh = Mesh(box_geometry(length, KEY_DEPTH, KEY_WIDTH), material, name=f"key {i}")
        mesh.set_position(0.5 * length, 0.5 * KEY_DEPTH, _key_z(i, base))
        return mesh

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        root = SceneNode(name=f"slot {i}")
        root.set_position(KEY_LENGTH * i + EPSILON, 0.0, _key_z(i, base))
        child.set_scale(1.0 / base, 1.0, 1.0 / base)
        root.add(child)
        return root


@register_layout
class KeyboardLoftedLayout(DigitLayout):
    """Key height grows with the digit value; children sit on top of it."""
    KEY = LayoutKey.KEYBOARD_LOFTED

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        mesh = Mesh(box_geometry(KEY_LENGTH, i * LOFT_DEPTH + EPSILON, KEY_WIDTH), material, name=f"key {i}")
        mesh.set_position(0.0, i * KEY_DEPTH, _key_z(i, base))
        return mesh

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        root = SceneNode(name=f"slot {i}")
        root.set_position(0.0, 2 * i * KEY_DEPTH, _key_z(i, base))
        root.set_scale(1.0, 1.0, 1.0 / base)
        child.position[0] = KEY_LENGTH
        child.scale[1] = 1.0 / base + EPSILON
        root.add(child)
        return root


# ------------------------------------------------------------------------------
# Boxes: wide slabs with gaps, children stacked on top
# ------------------------------------------------------------------------------

BOX_X = 1.0
BOX_Z = 3.0
BOX_GAP = 0.5


def _box_z(i: int, base: int) -> float:
    pitch = BOX_Z + BOX_GAP
    return -0.5 * (base - 1) * pitch + i * pitch


def _box_scale_z(base: int) -> float:
    return 1.0 / (base + 2 * BOX_GAP)


@register_layout
class BoxesLayout(DigitLayout):
    KEY = LayoutKey.BOXES

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        mesh = Mesh(box_geometry(BOX_X, KEY_DEPTH, BOX_Z), material, name=f"box {i}")
        mesh.set_position(0.0, 0.5 * KEY_DEPTH, _box_z(i, base))
        return mesh

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        root = SceneNode(name=f"slot {i}")
        root.set_position(0.0, KEY_DEPTH, _box_z(i, base))
        root.set_scale(0.8, 1.0, _box_scale_z(base))
        root.add(child)
        return root


@register_layout
class BoxesLoftedLayout(DigitLayout):
    KEY = LayoutKey.BOXES_LOFTED

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        mesh = Mesh(box_geometry(BOX_X, KEY_DEPTH * i + EPSILON, BOX_Z), material, name=f"box {i}")
        mesh.set_position(0.0, 0.5 * KEY_DEPTH * i, _box_z(i, base))
        return mesh

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        root = SceneNode(name=f"slot {i}")
        root.set_position(0.0, i * KEY_DEPTH + EPSILON, _box_z(i, base))
        root.set_scale(0.8, 1.0 / base + EPSILON, _box_scale_z(base))
        root.add(child)
        return root


# ------------------------------------------------------------------------------
# Squares: digits on a near-square grid in the xz-plane
# ------------------------------------------------------------------------------

SQUARE_SIDE = 1.0
SQUARE_HEIGHT = 0.2


def grid_shape(base: int) -> tuple[int, int]:
    """(rows, cols) of the square grid holding ``base`` cells."""
    nrows = math.isqrt(base)
    ncols = (base - 1) // nrows + 1
    return nrows, ncols


def _cell(i: int, base: int) -> tuple[int, int, float]:
    nrows, _ = grid_shape(base)
    minz = -0.5 * (nrows - 1) * SQUARE_SIDE
    row, col = i % nrows, i // nrows
    return row, col, minz + row * SQUARE_SIDE


def _slot_x(col: int, ncols: int) -> float:
    return col * SQUARE_SIDE - 0.5 * SQUARE_SIDE + (0.5 / ncols) * SQUARE_SIDE


@register_layout
class SquaresLayout(DigitLayout):
    KEY = LayoutKey.SQUARES

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        _, col, z = _cell(i, base)
        mesh = Mesh(box_geometry(SQUARE_SIDE, SQUARE_HEIGHT, SQUARE_SIDE), material, name=f"square {i}")
        mesh.set_position(col * SQUARE_SIDE, 0.5 * SQUARE_HEIGHT, z)
        return mesh

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        nrows, ncols = grid_shape(base)
        _, col, z = _cell(i, base)
        root = SceneNode(name=f"slot {i}")
        root.set_position(_slot_x(col, ncols), SQUARE_HEIGHT, z)
        root.set_scale(1.0 / ncols, 1.0, 1.0 / nrows)
        root.add(child)
        return root


@register_layout
class SquaresLoftedLayout(DigitLayout):
    KEY = LayoutKey.SQUARES_LOFTED

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        _, col, z = _cell(i, base)
        mesh = Mesh(box_geometry(SQUARE_SIDE, SQUARE_HEIGHT * i + EPSILON, SQUARE_SIDE), material, name=f"square {i}")
        mesh.set_position(col * SQUARE_SIDE, 0.5 * SQUARE_HEIGHT * i, z)
        return mesh

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        nrows, ncols = grid_shape(base)
        _, col, z = _cell(i, base)
        root = SceneNode(name=f"slot {i}")
        root.set_position(_slot_x(col, ncols), i * SQUARE_HEIGHT + EPSILON, z)
        root.set_scale(1.0 / ncols, 1.0 / base + EPSILON, 1.0 / nrows)
        root.add(child)
        return root


# ------------------------------------------------------------------------------
# Disks: a ring of disks around the y-axis
# ------------------------------------------------------------------------------

DISK_DEPTH = 0.05
DISK_RADIUS = 0.5
DISK_OFFSET = 3.0
DISK_CHILD_SCALE = 0.25
LOFTED_DISK_RADIUS = 2.0
LOFTED_DISK_HEIGHT = 1.0
LOFTED_DISK_OFFSET = 6.0


def _ring_unit(i: int, base: int, mesh: Mesh, offset: float) -> SceneNode:
    pivot = SceneNode(name=f"disk {i}")
    pivot.rotation[1] = i * TWO_PI / base
    mesh.position[0] = offset
    pivot.add(mesh)
    return pivot


@register_layout
class DisksLayout(DigitLayout):
    KEY = LayoutKey.DISKS

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        mesh = Mesh(cylinder_geometry(DISK_RADIUS, DISK_DEPTH), material)
        return _ring_unit(i, base, mesh, DISK_OFFSET)

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        root = SceneNode(name=f"slot {i}")
        root.rotation[1] = i * TWO_PI / base
        child.set_scale(DISK_CHILD_SCALE, 1.0 / base, DISK_CHILD_SCALE)
        child.position[0] = DISK_OFFSET
        root.add(child)
        return root


@register_layout
class DisksLoftedLayout(DigitLayout):
    KEY = LayoutKey.DISKS_LOFTED

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        mesh = Mesh(cylinder_geometry(LOFTED_DISK_RADIUS, LOFTED_DISK_HEIGHT * i + EPSILON), material)
        mesh.position[1] = 0.5 * LOFTED_DISK_HEIGHT * i
        return _ring_unit(i, base, mesh, LOFTED_DISK_OFFSET)

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        root = SceneNode(name=f"slot {i}")
        root.position[1] = i * LOFTED_DISK_HEIGHT + EPSILON
        root.rotation[1] = i * TWO_PI / base
        child.set_scale(DISK_CHILD_SCALE, 1.0 / base, DISK_CHILD_SCALE)
        child.position[0] = LOFTED_DISK_OFFSET
        root.add(child)
        return root


# ------------------------------------------------------------------------------
# Spheres: fixed positions along the six axis directions, at two radii
# ------------------------------------------------------------------------------

SPHERE_RADIUS = 1.0
SPHERE_OFFSET = 5.0
SPHERE_CHILD_SCALE = 0.4
SPHERE_POSITIONS = SPHERE_OFFSET * np.array([
    [0, 1, 0], [0, -1, 0], [1, 0, 0], [-1, 0, 0], [0, 0, 1], [0, 0, -1],
    [0, 2, 0], [0, -2, 0], [2, 0, 0], [-2, 0, 0], [0, 0, 2], [0, 0, -2],
], dtype=np.float64)


@register_layout
class SpheresLayout(DigitLayout):
    KEY = LayoutKey.SPHERES
    max_base = len(SPHERE_POSITIONS)

    def make_unit(self, i: int, base: int, material: Material) -> SceneNode:
        mesh = Mesh(sphere_geometry(SPHERE_RADIUS), material, name=f"sphere {i}")
        mesh.set_position(*SPHERE_POSITIONS[i])
        return mesh

    def transformer(self, i: int, base: int, child: SceneNode, depth: int) -> SceneNode:
        # The child's own frame is the slot; no extra wrapper node
        child.set_position(*SPHERE_POSITIONS[i])
        child.set_scale(SPHERE_CHILD_SCALE, SPHERE_CHILD_SCALE, SPHERE_CHILD_SCALE)
        return child
