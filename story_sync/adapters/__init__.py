"""Contracts for the player, map and scroll container, plus Qt implementations."""

from .base import MapAdapter, MarkerHandle, PanelSink, PlayerAdapter, ScrollContainerAdapter
from .qt_scroll import ScrollAreaAdapter, WidgetPanelSink

__all__ = [
    "MapAdapter",
    "MarkerHandle",
    "PanelSink",
    "PlayerAdapter",
    "ScrollAreaAdapter",
    "ScrollContainerAdapter",
    "WidgetPanelSink",
]
