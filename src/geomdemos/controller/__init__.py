"""
The CONTROLLER layer owns each demo's scene graph and translates settings
changes into scene updates. Like the model it imports no Qt.
"""
from geomdemos.controller.base import Demo, Refresh
from geomdemos.controller.clock import Clock
from geomdemos.controller.klein_demo import KleinBottleDemo
from geomdemos.controller.string_demo import StringSystemDemo

__all__ = ["Demo", "Refresh", "Clock", "KleinBottleDemo", "StringSystemDemo"]
