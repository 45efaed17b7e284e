from .session import StorySession

__all__ = ["StorySession"]
