"""Input sources and the arbiter that reconciles them into one focused chapter."""

from .arbiter import FocusArbiter
from .poller import PlaybackPoller
from .scroll import ScrollObserver, focus_zone, resolve_scroll_focus

__all__ = ["FocusArbiter", "PlaybackPoller", "ScrollObserver", "focus_zone", "resolve_scroll_focus"]
