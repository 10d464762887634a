"""
Virtual screen bounds from the Qt screen list.
"""
from typing import Optional
from PyQt5.QtGui import QGuiApplication

from gestures.landmarks import Rect


def virtual_screen_bounds() -> Optional[Rect]:
    """
    Union of all screen geometries in pixels.

    Requires a running QGuiApplication. Returns None without screens.
    """
    bounds: Optional[Rect] = None
    for screen in QGuiApplication.screens():
        geometry = screen.geometry()
        rect = Rect(geometry.x(), geometry.y(), geometry.width(), geometry.height())
        bounds = rect if bounds is None else bounds.union(rect)
    return bounds
