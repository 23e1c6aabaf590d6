import numpy as np
import pytest

from geomdemos.model.materials import Material, Side, digit_material, hsl_to_hex
from geomdemos.model.scene import Mesh, SceneNode, count_nodes, iter_meshes, world_matrix


def test_add_is_idempotent_and_rejects_self():
    root, child = SceneNode("root"), SceneNode("child")
    root.add(child)
    root.add(child)
    assert root.children == [child]
    with pytest.raises(ValueError):
        root.add(root)


def test_remove_missing_child_is_noop():
    root = SceneNode("root")
    root.remove(SceneNode("stranger"))
    assert root.children == []


def test_local_matrix_translation_and_scale():
    node = SceneNode()
    node.set_position(1.0, 2.0, 3.0)
    node.set_scale(2.0, 3.0, 4.0)
    point = node.local_matrix() @ np.array([1.0, 1.0, 1.0, 1.0])
    np.testing.assert_allclose(point[:3], [3.0, 5.0, 7.0])


def test_local_matrix_rotation_about_y():
    node = SceneNode()
    node.rotation[1] = np.pi / 2
    point = node.local_matrix() @ np.array([1.0, 0.0, 0.0, 1.0])
    np.testing.assert_allclose(point[:3], [0.0, 0.0, -1.0], atol=1e-12)


def test_clone_copies_transforms_and_shares_geometry():
    geometry = object()
    material = Material()
    root = SceneNode("root")
    mesh = Mesh(geometry, material, name="leaf")
    mesh.set_position(1.0, 0.0, 0.0)
    root.add(mesh)

    twin = root.clone()
    twin.children[0].set_position(5.0, 0.0, 0.0)

    assert twin is not root
    assert twin.children[0] is not mesh
    assert mesh.position[0] == 1.0
    assert twin.children[0].geometry is geometry
    assert twin.children[0].material is material


def test_iter_meshes_world_matrices_and_dynamic_flag():
    root = SceneNode("root")
    root.set_position(0.0, 1.0, 0.0)
    group = SceneNode("group")
    group.set_scale(2.0, 2.0, 2.0)
    group.dynamic = True
    leaf = Mesh(object(), Material(), name="leaf")
    leaf.set_position(1.0, 0.0, 0.0)
    still = Mesh(object(), Material(), name="still")
    group.add(leaf)
    root.add(group, still)

    found = {mesh.name: (matrix, dynamic) for mesh, matrix, dynamic in iter_meshes(root)}
    assert set(found) == {"leaf", "still"}
    matrix, dynamic = found["leaf"]
    np.testing.assert_allclose(matrix[:3, 3], [2.0, 1.0, 0.0])
    assert dynamic
    assert not found["still"][1]
    np.testing.assert_allclose(world_matrix(root, leaf), matrix)


def test_world_matrix_of_foreign_node_is_none():
    assert world_matrix(SceneNode(), SceneNode()) is None


def test_count_nodes():
    root = SceneNode()
    root.add(SceneNode(), SceneNode())
    root.children[0].add(SceneNode())
    assert count_nodes(root) == 4


def test_material_culling():
    assert Material(side=Side.FRONT).culling == "back"
    assert Material(side=Side.BACK).culling == "front"
    assert Material(side=Side.DOUBLE).culling is None


def test_materials_compare_by_identity():
    assert Material() != Material()
    assert len({Material(), Material()}) == 2


def test_hsl_to_hex():
    assert hsl_to_hex(0.0, 1.0, 0.5) == "#ff0000"
    assert hsl_to_hex(1 / 3, 1.0, 0.5) == "#00ff00"
    assert hsl_to_hex(2 / 3, 1.0, 0.5) == "#0000ff"


def test_digit_material_hues():
    assert digit_material(0, 3).color == "#ff0000"
    assert digit_material(1, 3).color == "#00ff00"
