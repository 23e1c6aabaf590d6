"""
Scene Graph
===========
A minimal hierarchical transform tree that the 3D widget flattens into
PyVista actors.

Why is this file needed?
------------------------
1. Composition: Demos build nested structures (a string system is a tree of
   scaled and rotated copies of itself). Each node carries a local
   position/rotation/scale, and the world transform of a mesh is the product
   of the local transforms on the path from the root.
2. Value semantics: ``clone()`` copies the node hierarchy so that sibling
   copies can be transformed independently, while geometry and materials
   (which are immutable from the model's point of view) are shared.

Classes:
    SceneNode: Container node with a local transform and children.
    Mesh: Leaf node carrying opaque geometry and a Material.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Iterator, Optional, TYPE_CHECKING

import numpy as np

from geomdemos.model.materials import Material

if TYPE_CHECKING:
    import numpy.typing as npt
    import pyvista as pv


def _rotation_matrix(angles: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Rotation for Euler angles applied in XYZ order (R = Rx @ Ry @ Rz)."""
    ax, ay, az = angles
    cx, sx = np.cos(ax), np.sin(ax)
    cy, sy = np.cos(ay), np.sin(ay)
    cz, sz = np.cos(az), np.sin(az)
    rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return rx @ ry @ rz


class SceneNode:
    """
    A node of the scene graph.
    """
    def __init__(self, name: str = "") -> None:
        self.name = name
        self.position: npt.NDArray[np.float64] = np.zeros(3)
        self.rotation: npt.NDArray[np.float64] = np.zeros(3)
        self.scale: npt.NDArray[np.float64] = np.ones(3)
        self.children: list[SceneNode] = []
        # Digit this node stands for in a string system (None elsewhere)
        self.digit: Optional[int] = None
        # Dynamic nodes move every frame and are not batched by the renderer
        self.dynamic: bool = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, children={len(self.children)})"

    # --- hierarchy ---

    def add(self, *nodes: SceneNode) -> None:
        for node in nodes:
            if node is self:
                raise ValueError("A node cannot be its own child.")
            if node not in self.children:
                self.children.append(node)

    def remove(self, node: SceneNode) -> None:
        """Detach ``node``; does nothing if it is not a direct child."""
        if node in self.children:
            self.children.remove(node)

    def clear(self) -> None:
        self.children.clear()

    def traverse(self) -> Iterator[SceneNode]:
        """Depth-first, pre-order walk over this subtree."""
        yield self
        for child in self.children:
            yield from child.traverse()

    def clone(self) -> SceneNode:
        """Copy of this subtree with independent transforms."""
        twin = copy.copy(self)
        twin.position = self.position.copy()
        twin.rotation = self.rotation.copy()
        twin.scale = self.scale.copy()
        twin.children = [child.clone() for child in self.children]
        return twin

    # --- transforms ---

    def set_position(self, x: float, y: float, z: float) -> None:
        self.position[:] = (x, y, z)

    def set_scale(self, x: float, y: float, z: float) -> None:
        self.scale[:] = (x, y, z)

    def local_matrix(self) -> npt.NDArray[np.float64]:
        """4x4 matrix T @ R @ S."""
        m = np.eye(4)
        m[:3, :3] = _rotation_matrix(self.rotation) * self.scale
        m[:3, 3] = self.position
        return m


class Mesh(SceneNode):
    """Leaf node: geometry drawn with a material at the node's world transform."""

    def __init__(self, geometry: pv.PolyData, material: Material, name: str = "") -> None:
        super().__init__(name)
        self.geometry = geometry
        self.material = material


def iter_meshes(
    root: SceneNode,
    parent_matrix: Optional[npt.NDArray[np.float64]] = None,
    dynamic: bool = False,
) -> Iterator[tuple[Mesh, npt.NDArray[np.float64], bool]]:
    """
    Yield ``(mesh, world_matrix, dynamic)`` for every mesh below ``root``.

    ``dynamic`` is True when the mesh or one of its ancestors is flagged as
    moving every frame.
    """
    world = root.local_matrix() if parent_matrix is None else parent_matrix @ root.local_matrix()
    dynamic = dynamic or root.dynamic
    if isinstance(root, Mesh):
        yield root, world, dynamic
    for child in root.children:
        yield from iter_meshes(child, world, dynamic)


def world_matrix(root: SceneNode, target: SceneNode) -> Optional[npt.NDArray[np.float64]]:
    """World matrix of ``target`` inside the tree at ``root`` (None if not found)."""
    if root is target:
        return root.local_matrix()
    for child in root.children:
        found = world_matrix(child, target)
        if found is not None:
            return root.local_matrix() @ found
    return None


def count_nodes(root: SceneNode) -> int:
    return sum(1 for _ in root.traverse())


@dataclass(frozen=True)
class PointLight:
    position: tuple[float, float, float]
    intensity: float = 1.0
    color: str = "#ffffff"


@dataclass(frozen=True)
class CameraSetup:
    position: tuple[float, float, float]
    focal_point: tuple[float, float, float] = (0.0, 0.0, 0.0)
    view_up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    view_angle: float = 40.0
