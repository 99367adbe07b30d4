"""Pocket toolpath generation package."""

from .area import ShapelyArea
from .base import PocketEngine, PocketParams, PocketStrategy

__all__ = ["ShapelyArea", "PocketEngine", "PocketParams", "PocketStrategy"]
