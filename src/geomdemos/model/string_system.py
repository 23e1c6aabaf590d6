"""
String Systems
==============
Recursive construction of the digit-expansion tree of a number base.

A string system of depth ``n`` is one digits graph (the units of the
single-digit strings) plus, for every active digit ``i``, a copy of the
depth ``n - 1`` system placed into the slot of ``i``. Level ``k`` therefore
shows every digit string of length ``k``, each nested inside the unit of its
prefix.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from geomdemos.errors import InvalidParameterError, require_int
from geomdemos.model.layouts import DigitLayout
from geomdemos.model.materials import Material
from geomdemos.model.scene import SceneNode

logger = logging.getLogger(__name__)


def validate_parameters(n: int, base: int, layout: DigitLayout, include: Iterable[int]) -> list[int]:
    """
    Check the builder inputs and return the active digits in ascending order.

    Raises:
        InvalidParameterError: If ``n`` or ``base`` is not an integer,
            ``n < 1``, ``base < 2``, the layout cannot hold ``base`` digits,
            or a digit is not an integer in ``[0, base)``.
    """
    n = require_int("n", n)
    base = require_int("base", base)
    if n < 1:
        raise InvalidParameterError("n", n, "depth must be at least 1")
    if base < 2:
        raise InvalidParameterError("base", base, "base must be at least 2")
    if layout.max_base is not None and base > layout.max_base:
        raise InvalidParameterError("base", base, f"layout '{layout.KEY}' supports at most {layout.max_base} digits")
    digits = sorted({require_int("include", i) for i in include})
    outside = [i for i in digits if not 0 <= i < base]
    if outside:
        raise InvalidParameterError("include", outside, f"digits must lie in [0, {base})")
    return digits


def build_string_system(
    n: int,
    base: int,
    layout: DigitLayout,
    include: Iterable[int],
    material: Optional[Material] = None,
    digits_graph: Optional[SceneNode] = None,
) -> SceneNode:
    """
    Build the string system of depth ``n``.

    Args:
        n: Depth (number of digit levels), at least 1.
        base: Number base, at least 2.
        layout: Digit layout providing the digits graph and the transformer.
        include: Active digits; inactive digits are never instantiated.
        material: Shared material for all units (one-colour mode). None
            colours each digit by its hue.
        digits_graph: Prebuilt terminal digits graph; built from ``layout``
            when omitted.

    Returns:
        Root node of the tree.
    """
    digits = validate_parameters(n, base, layout, include)
    if digits_graph is None:
        digits_graph = layout.digits_graph(base, digits, material)
    root = _build(n, base, layout, digits, digits_graph)
    logger.debug(f"Built '{layout.KEY}' string system n={n}, base={base}, digits={digits}.")
    return root


def _build(n: int, base: int, layout: DigitLayout, digits: list[int], digits_graph: SceneNode) -> SceneNode:
    root = SceneNode(name=f"level {n}")
    root.add(digits_graph.clone())
    if n > 1:
        child = _build(n - 1, base, layout, digits, digits_graph)
        for i in digits:
            # Each slot gets its own copy; the transformer may edit the child's transform
            root.add(layout.wrap(i, base, child.clone(), n))
    return root


def count_digit_graphs(n: int, k: int) -> int:
    """Number of digits-graph copies in a depth ``n`` system with ``k`` active digits."""
    total = 0
    for level in range(n):
        total += k ** level
    return total
