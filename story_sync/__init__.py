"""Keeps a story map's camera, chapter panels and video playback on one focused chapter."""

from .controller import StorySession
from .errors import AdapterNotReady, SettingsError, StorySyncError

__all__ = ["AdapterNotReady", "SettingsError", "StorySession", "StorySyncError"]
