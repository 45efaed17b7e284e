from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import logging

import numpy as np
from PyQt5 import QtCore

from ..adapters.base import ScrollContainerAdapter
from ..model.entities import ChapterExtent


def focus_zone(offset: float, visible_height: float, top: float = 0.1, bottom: float = 0.9) -> Tuple[float, float]:
    return offset + visible_height * top, offset + visible_height * bottom


def resolve_scroll_focus(
    offset: float,
    visible_height: float,
    extents: Sequence[ChapterExtent],
    top: float = 0.1,
    bottom: float = 0.9,
) -> Optional[int]:
    """Return the display index of the chapter occupying the focus zone.

    Among extents overlapping the zone, the first whose centre lies inside the
    visible window wins; otherwise the first overlapping one; otherwise None.
    """
    if not extents or visible_height <= 0:
        return None
    tops = np.fromiter((e.offset_top for e in extents), dtype=float, count=len(extents))
    heights = np.fromiter((e.height for e in extents), dtype=float, count=len(extents))
    bottoms = tops + heights
    zone_start, zone_end = focus_zone(offset, visible_height, top, bottom)

    overlaps = (heights > 0) & (tops < zone_end) & (bottoms > zone_start)
    if not overlaps.any():
        return None
    centers = tops + heights / 2.0
    centered = overlaps & (centers >= offset) & (centers < offset + visible_height)
    if centered.any():
        return int(np.argmax(centered))
    return int(np.argmax(overlaps))


class ScrollObserver(QtCore.QObject):
    """Turns container scroll offsets into de-duplicated chapter focus events."""

    scrollFocus = QtCore.pyqtSignal(object)

    def __init__(
        self,
        container: ScrollContainerAdapter,
        zone_top: float = 0.1,
        zone_bottom: float = 0.9,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._log = logging.getLogger(__name__)
        self._container = container
        self._zone = (zone_top, zone_bottom)
        self._extents: Optional[List[ChapterExtent]] = None
        self._last_emitted: Optional[int] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def last_emitted(self) -> Optional[int]:
        return self._last_emitted

    def set_extents(self, extents: Sequence[ChapterExtent]) -> None:
        self._extents = list(extents)

    def invalidate(self) -> None:
        self._extents = None

    def extents(self) -> List[ChapterExtent]:
        if self._extents is None:
            self._extents = list(self._container.extents())
            self._log.debug("ScrollObserver: measured %s chapter extents", len(self._extents))
        return self._extents

    def reset(self) -> None:
        self._extents = None
        self._last_emitted = None

    # ------------------------------------------------------------------
    # Container notifications
    # ------------------------------------------------------------------
    @QtCore.pyqtSlot(float)
    def on_scrolled(self, _offset: float) -> None:
        self.evaluate()

    @QtCore.pyqtSlot()
    def on_layout_changed(self) -> None:
        self.invalidate()
        self.evaluate()

    def evaluate(self) -> Optional[int]:
        top, bottom = self._zone
        resolved = resolve_scroll_focus(
            float(self._container.scroll_offset()),
            float(self._container.visible_height()),
            self.extents(),
            top,
            bottom,
        )
        if resolved != self._last_emitted:
            self._log.debug("ScrollObserver: focus %s -> %s", self._last_emitted, resolved)
            self._last_emitted = resolved
            self.scrollFocus.emit(resolved)
        return resolved
