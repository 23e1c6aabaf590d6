"""
Configuration & Global Constants
================================
This module serves as the central registry for the constants shared by the
model, the controllers and the UI.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (ranges, resolutions, colours)
   from being scattered through the panels and controllers.
2. Consistency: The control panels clamp their widgets to the same ranges
   that the model validates against.

Exports:
    VISIBLE_APP_NAME (str): Window title.
    FRAME_INTERVAL_MS (int): Animation timer period.
    MAX_LEVELS, MAX_BASE (int): String-system parameter limits.
"""
from typing import Tuple

VISIBLE_APP_NAME: str = "Geometry Demos"

# Animation loop (~60 fps)
FRAME_INTERVAL_MS: int = 16

# --- Klein bottle demo ---
KLEIN_SEGMENTS: Tuple[int, int] = (200, 200)  # (u, v) resolution of the surface mesh
KLEIN_DEFAULT_COLOR: str = "#1562c9"
KLEIN_V_RANGE: Tuple[float, float] = (0.0, 0.9)
KLEIN_V_STEP: float = 0.1
KLEIN_CAMERA_DISTANCE: float = 64.0
KLEIN_AXES_LENGTH: float = 10.0

BALL_RADIUS: float = 0.5
BALL_COLOR: str = "#ff0000"
BALL_SPEED: float = 0.07  # parameter units per second
BALL_START: Tuple[float, float] = (0.0, 0.5)
BALL_DIRECTION: Tuple[float, float] = (1.0, 0.0)
NORMAL_EPSILON: float = 0.01

# --- String system demo ---
MIN_LEVELS: int = 1
MAX_LEVELS: int = 4
MIN_BASE: int = 2
MAX_BASE: int = 10
STRINGS_DEFAULT_COLOR: str = "#3366ff"
STRINGS_CAMERA_DISTANCE: float = 8.0

CAMERA_VIEW_ANGLE: float = 40.0
DEFAULT_SHININESS: float = 80.0
