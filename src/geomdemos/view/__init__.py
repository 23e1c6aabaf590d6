"""
The VIEW layer: Qt widgets and the PyVista render window.
It reads demo scene graphs and settings, and never builds geometry itself.
"""
