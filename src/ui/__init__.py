"""
MouseGest UI Module

PyQt5 capture window that feeds mouse input to the gesture worker.
"""
from .capture_window import CaptureWindow

__all__ = [
    'CaptureWindow',
]
