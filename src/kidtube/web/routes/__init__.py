"""Route modules for the KidTube API."""

from . import profiles, videos

__all__ = [
    "profiles",
    "videos",
]
