"""Tk configuration tool and socket client for a live wallpaper daemon."""

__version__ = "0.1.0"
__all__ = ["app", "bg", "cmd", "colors", "widgets"]