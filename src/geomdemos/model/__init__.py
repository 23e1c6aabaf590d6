"""
The MODEL layer contains pure data structures and the geometric algorithms.
It has NO knowledge of the GUI (Qt). Geometry is carried as opaque PyVista
datasets that only the view ever inspects.
"""
