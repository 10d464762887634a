"""
FingerCursor Pointer Module

System cursor control and screen geometry.
"""
from .injector import PointerInjector
from .screens import virtual_screen_bounds

__all__ = [
    'PointerInjector',
    'virtual_screen_bounds',
]
