import numpy as np
import pytest

from geomdemos.errors import InvalidParameterError
from geomdemos.model.layouts import LayoutKey, create_layout
from geomdemos.model.materials import Material
from geomdemos.model.scene import iter_meshes
from geomdemos.model.string_system import build_string_system, count_digit_graphs, validate_parameters


def digits_graphs(root):
    return [node for node in root.traverse() if node.name.endswith(" digits")]


def snapshot(root):
    return [
        (node.name, node.digit, tuple(node.position), tuple(node.rotation), tuple(node.scale))
        for node in root.traverse()
    ]


def test_base_case_is_a_single_digits_graph():
    root = build_string_system(1, 3, create_layout(LayoutKey.KEYBOARD), [0, 1, 2])
    assert len(digits_graphs(root)) == 1
    assert len(list(iter_meshes(root))) == 3


def test_two_levels_of_base_three():
    root = build_string_system(2, 3, create_layout(LayoutKey.KEYBOARD), {0, 1, 2})
    assert len(digits_graphs(root)) == 4
    assert len(list(iter_meshes(root))) == 12


@pytest.mark.parametrize("key", list(LayoutKey))
@pytest.mark.parametrize("n, include", [(1, [0]), (2, [0, 1]), (3, [1, 2]), (3, [0, 1, 2])])
def test_digit_graph_count(key, n, include):
    root = build_string_system(n, 3, create_layout(key), include)
    assert len(digits_graphs(root)) == count_digit_graphs(n, len(include))


def test_count_digit_graphs():
    assert count_digit_graphs(1, 5) == 1
    assert count_digit_graphs(2, 3) == 4
    assert count_digit_graphs(3, 2) == 7
    assert count_digit_graphs(4, 1) == 4


def test_excluded_digits_never_appear():
    root = build_string_system(3, 4, create_layout(LayoutKey.BOXES), [0, 2])
    digits = {node.digit for node in root.traverse() if node.digit is not None}
    assert digits == {0, 2}


def test_children_follow_ascending_digit_order():
    root = build_string_system(2, 4, create_layout(LayoutKey.SQUARES), [3, 1, 2])
    slots = [child.digit for child in root.children[1:]]
    assert slots == [1, 2, 3]


def test_build_is_deterministic():
    layout = create_layout(LayoutKey.DISKS_LOFTED)
    first = build_string_system(3, 3, layout, [0, 1, 2])
    second = build_string_system(3, 3, layout, [0, 1, 2])
    assert snapshot(first) == snapshot(second)


def test_sibling_copies_are_independent():
    root = build_string_system(3, 2, create_layout(LayoutKey.KEYBOARD_LENGTHENED), [0, 1])
    a, b = root.children[1], root.children[2]
    assert a is not b
    a.children[0].position[:] = 99.0
    assert not np.allclose(b.children[0].position, 99.0)


def test_supplied_digits_graph_is_cloned_not_reused():
    layout = create_layout(LayoutKey.KEYBOARD)
    terminal = layout.digits_graph(2, [0, 1])
    root = build_string_system(2, 2, layout, [0, 1], digits_graph=terminal)
    assert all(graph is not terminal for graph in digits_graphs(root))


def test_one_colour_mode_shares_material():
    shared = Material(color="#abcdef")
    root = build_string_system(2, 3, create_layout(LayoutKey.SPHERES), [0, 1, 2], material=shared)
    assert all(mesh.material is shared for mesh, _, _ in iter_meshes(root))


@pytest.mark.parametrize("n, base, include", [
    (0, 3, [0]),
    (2, 1, [0]),
    (2, 4, [0, 4]),
    (2, 4, [-1]),
])
def test_invalid_parameters_rejected(n, base, include):
    with pytest.raises(InvalidParameterError):
        build_string_system(n, base, create_layout(LayoutKey.KEYBOARD), include)


def test_spheres_reject_large_base():
    with pytest.raises(InvalidParameterError) as info:
        build_string_system(1, 13, create_layout(LayoutKey.SPHERES), [0])
    assert info.value.name == "base"


def test_empty_digit_set_gives_empty_graphs():
    root = build_string_system(3, 3, create_layout(LayoutKey.KEYBOARD), [])
    assert list(iter_meshes(root)) == []
    assert len(digits_graphs(root)) == 1


def test_validate_parameters_sorts_and_deduplicates():
    assert validate_parameters(1, 5, create_layout(LayoutKey.BOXES), [4, 1, 4, 0]) == [0, 1, 4]


@pytest.mark.parametrize("n, base, include", [
    (2.5, 3, [0, 1, 2]),
    (2.0, 3, [0, 1, 2]),
    (True, 3, [0, 1]),
    ("2", 3, [0]),
    (2, 3.0, [0, 1]),
    (2, 3, [0, 1.5]),
])
def test_non_integer_parameters_rejected(n, base, include):
    with pytest.raises(InvalidParameterError):
        build_string_system(n, base, create_layout(LayoutKey.KEYBOARD), include)


def test_numpy_integers_accepted():
    root = build_string_system(np.int64(2), np.int64(3), create_layout(LayoutKey.KEYBOARD), np.arange(3))
    assert len(digits_graphs(root)) == 4
