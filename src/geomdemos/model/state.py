"""
Demo Settings (Data Model)
==========================
This module defines the user-adjustable settings of both demos.

Why is this file needed?
------------------------
1. State Management: Control panels write here; controllers read from here.
2. Validation: A candidate settings object is validated as a whole before it
   replaces the current one, so a rejected change leaves the prior state
   untouched.

Classes:
    KleinSettings: Surface demo settings.
    StringSystemSettings: String-system demo settings.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging

from geomdemos.config import (
    KLEIN_DEFAULT_COLOR, KLEIN_V_RANGE, MAX_BASE, MAX_LEVELS, MIN_BASE, MIN_LEVELS, STRINGS_DEFAULT_COLOR
)
from geomdemos.errors import InvalidParameterError, require_int
from geomdemos.model.layouts import LayoutKey, create_layout

logger = logging.getLogger(__name__)


def _check_color(value: str) -> None:
    text = value[1:] if isinstance(value, str) and value.startswith("#") else ""
    if len(text) != 6 or any(c not in "0123456789abcdefABCDEF" for c in text):
        raise InvalidParameterError("color", value, "expected '#rrggbb'")


@dataclass
class KleinSettings:
    color: str = KLEIN_DEFAULT_COLOR
    opacity: float = 1.0
    show_ball: bool = False
    v: float = 0.5  # starting v of the ball

    def validate(self) -> None:
        _check_color(self.color)
        if not 0.0 <= self.opacity <= 1.0:
            raise InvalidParameterError("opacity", self.opacity, "must lie in [0, 1]")
        lo, hi = KLEIN_V_RANGE
        if not lo <= self.v <= hi:
            raise InvalidParameterError("v", self.v, f"must lie in [{lo}, {hi}]")

    def reset(self) -> None:
        defaults = KleinSettings()
        self.__dict__.update(defaults.__dict__)


@dataclass
class StringSystemSettings:
    """
    Settings of the string-system demo.

    ``digits[i]`` tells whether digit ``i`` is active; the list always has
    ``base`` entries.
    """
    n: int = 1
    base: int = MIN_BASE
    model: str = LayoutKey.KEYBOARD
    color: str = STRINGS_DEFAULT_COLOR
    one_color: bool = False
    digits: list[bool] = field(default_factory=lambda: [True] * MIN_BASE)

    def include_set(self) -> list[int]:
        return [i for i, on in enumerate(self.digits) if on]

    def with_changes(self, **changes) -> StringSystemSettings:
        """
        Candidate copy with ``changes`` applied.

        Changing ``base`` re-enables every digit of the new base unless
        ``digits`` is given explicitly.
        """
        unknown = set(changes) - set(self.__dataclass_fields__)
        if unknown:
            raise InvalidParameterError("settings", sorted(unknown), "unknown setting")
        candidate = replace(self, digits=list(self.digits))
        for key, value in changes.items():
            setattr(candidate, key, value)
        if "base" in changes and "digits" not in changes and changes["base"] != self.base:
            candidate.digits = [True] * require_int("base", changes["base"])
        return candidate

    def validate(self) -> None:
        require_int("n", self.n)
        require_int("base", self.base)
        if not MIN_LEVELS <= self.n <= MAX_LEVELS:
            raise InvalidParameterError("n", self.n, f"must lie in [{MIN_LEVELS}, {MAX_LEVELS}]")
        if not MIN_BASE <= self.base <= MAX_BASE:
            raise InvalidParameterError("base", self.base, f"must lie in [{MIN_BASE}, {MAX_BASE}]")
        if len(self.digits) != self.base:
            raise InvalidParameterError("digits", self.digits, f"expected {self.base} flags")
        layout = create_layout(self.model)
        if layout.max_base is not None and self.base > layout.max_base:
            raise InvalidParameterError("base", self.base, f"layout '{self.model}' supports at most {layout.max_base}")
        _check_color(self.color)

    def reset(self) -> None:
        defaults = StringSystemSettings()
        self.__dict__.update(defaults.__dict__)
        logger.info("String system settings have been reset.")
