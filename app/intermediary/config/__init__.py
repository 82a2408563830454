"""Configuration."""

from .settings import cfg

__all__ = ["cfg"]
