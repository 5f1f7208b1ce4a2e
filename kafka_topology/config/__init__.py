"""
Configuration Package

Run settings and the dependency injection container.
"""

from .container import Container
from .settings import Settings

__all__ = [
    "Container",
    "Settings",
]
