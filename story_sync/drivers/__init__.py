from .highlight import HighlightDriver, apply_highlight
from .viewport import ViewportDriver

__all__ = ["HighlightDriver", "ViewportDriver", "apply_highlight"]
