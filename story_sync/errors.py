class StorySyncError(Exception):
    """Base class for errors raised by story_sync."""


class AdapterNotReady(StorySyncError):
    """An external adapter is unavailable or rejected a command."""

    def __init__(self, adapter: str, message: str = "") -> None:
        self.adapter = adapter
        super().__init__(f"{adapter} not ready" + (f": {message}" if message else ""))


class SettingsError(StorySyncError):
    pass
