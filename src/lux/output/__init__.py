"""Image output.

Components:
    export: PNG writing and reading through Pillow
"""

from .export import load_png, save_png

__all__ = [
    "save_png",
    "load_png",
]
