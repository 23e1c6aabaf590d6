import numpy as np
import pytest

from geomdemos.model.scene import SceneNode
from geomdemos.model.surfaces import klein_bottle
from geomdemos.model.walker import MovingObject, SurfaceWalker


def flat_plane(u, v):
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    return np.stack([u, v, np.zeros_like(u)], axis=-1)


@pytest.fixture
def walker():
    return SurfaceWalker(klein_bottle)


def make_ball(walker, u, v, direction=(1.0, 0.0), pps=0.1, **kwargs):
    return MovingObject(walker=walker, position=[u, v], direction=direction, pps=pps, **kwargs)


def test_direction_is_normalised(walker):
    ball = make_ball(walker, 0.0, 0.5, direction=(3.0, 4.0))
    np.testing.assert_allclose(ball.direction, [0.6, 0.8])


def test_zero_direction_rejected(walker):
    with pytest.raises(ValueError):
        make_ball(walker, 0.0, 0.5, direction=(0.0, 0.0))


def test_plain_step_moves_along_u(walker):
    ball = make_ball(walker, 0.1, 0.3)
    walker.step(ball, 1.0)
    assert ball.u == pytest.approx(0.2)
    assert ball.v == pytest.approx(0.3)
    assert ball.normal_sign == 1


def test_v_wrap_keeps_normal_sign(walker):
    ball = make_ball(walker, 0.2, 0.95, direction=(0.0, 1.0))
    walker.step(ball, 1.0)
    assert ball.u == pytest.approx(0.2)
    assert ball.v == pytest.approx(0.05)
    assert ball.normal_sign == 1


def test_negative_v_wraps(walker):
    ball = make_ball(walker, 0.2, 0.05, direction=(0.0, -1.0))
    walker.step(ball, 1.0)
    assert ball.v == pytest.approx(0.95)
    assert ball.normal_sign == 1


@pytest.mark.parametrize("v, expected", [(0.2, 0.3), (0.7, 0.8), (0.5, 1.0), (0.1, 0.4)])
def test_u_seam_remaps_v_and_flips(walker, v, expected):
    ball = make_ball(walker, 0.95, v)
    walker.step(ball, 1.0)
    assert ball.u == pytest.approx(0.05)
    assert ball.v == pytest.approx(expected)
    assert 0.0 < ball.v <= 1.0
    assert ball.normal_sign == -1


def test_second_crossing_restores_sign(walker):
    ball = make_ball(walker, 0.95, 0.2)
    walker.step(ball, 1.0)
    ball.set_position(0.95, ball.v)
    walker.step(ball, 1.0)
    assert ball.normal_sign == 1
    # 0.2 -> 0.3 -> 0.2
    assert ball.v == pytest.approx(0.2)


def test_negative_u_crosses_seam(walker):
    ball = make_ball(walker, 0.05, 0.2, direction=(-1.0, 0.0))
    walker.step(ball, 1.0)
    assert ball.u == pytest.approx(0.95)
    assert ball.v == pytest.approx(0.3)
    assert ball.normal_sign == -1


def test_long_step_flips_once_per_crossing(walker):
    ball = make_ball(walker, 0.5, 0.2, pps=1.0)
    walker.step(ball, 2.0)
    assert ball.u == pytest.approx(0.5)
    assert ball.normal_sign == 1
    walker.step(ball, 1.0)
    assert ball.normal_sign == -1


def test_torus_mode_never_flips():
    walker = SurfaceWalker(klein_bottle, is_klein=False)
    ball = make_ball(walker, 0.95, 0.2)
    walker.step(ball, 1.0)
    assert ball.u == pytest.approx(0.05)
    assert ball.v == pytest.approx(0.2)
    assert ball.normal_sign == 1


def test_normal_is_unit_length(walker):
    for u, v in [(0.1, 0.2), (0.3, 0.7), (0.6, 0.4), (0.85, 0.1)]:
        assert np.linalg.norm(walker.normal(u, v)) == pytest.approx(1.0)


def test_degenerate_normal_is_zero():
    walker = SurfaceWalker(lambda u, v: np.zeros(3))
    np.testing.assert_array_equal(walker.normal(0.5, 0.5), np.zeros(3))


def test_offset_follows_normal_sign():
    walker = SurfaceWalker(flat_plane)
    up = make_ball(walker, 0.2, 0.2, offset=0.5)
    down = make_ball(walker, 0.2, 0.2, offset=0.5, normal_sign=-1)
    assert walker.step(up, 0.0)[2] == pytest.approx(0.5)
    assert walker.step(down, 0.0)[2] == pytest.approx(-0.5)


def test_step_moves_node(walker):
    node = SceneNode("ball")
    ball = make_ball(walker, 0.1, 0.3, node=node, offset=0.5)
    world = walker.step(ball, 1.0)
    np.testing.assert_allclose(node.position, world)
    distance = np.linalg.norm(world - klein_bottle(ball.u, ball.v))
    assert distance == pytest.approx(0.5)


def test_advance_delegates_to_walker(walker):
    ball = make_ball(walker, 0.1, 0.3)
    ball.advance(0.5)
    assert ball.u == pytest.approx(0.15)


def test_normal_signs_are_per_object(walker):
    a = make_ball(walker, 0.95, 0.2)
    b = make_ball(walker, 0.1, 0.2)
    walker.step(a, 1.0)
    walker.step(b, 1.0)
    assert a.normal_sign == -1
    assert b.normal_sign == 1
