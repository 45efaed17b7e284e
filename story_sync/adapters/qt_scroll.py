from __future__ import annotations

from typing import List, Optional, Sequence

from PyQt5 import QtCore, QtWidgets

from ..model.entities import ChapterExtent
from .base import PanelSink, ScrollContainerAdapter


class ScrollAreaAdapter(ScrollContainerAdapter):
    """Reads chapter extents from the widgets laid out inside a QScrollArea."""

    _REFLOW_EVENTS = (QtCore.QEvent.Resize, QtCore.QEvent.LayoutRequest)

    def __init__(
        self,
        area: QtWidgets.QScrollArea,
        chapter_widgets: Sequence[QtWidgets.QWidget] = (),
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._area = area
        self._widgets: List[QtWidgets.QWidget] = list(chapter_widgets)
        self._content: Optional[QtWidgets.QWidget] = None
        # Reflow is reported on the next loop turn, after the layout has moved the cards.
        self._reflow_timer = QtCore.QTimer(self)
        self._reflow_timer.setSingleShot(True)
        self._reflow_timer.setInterval(0)
        self._reflow_timer.timeout.connect(self.layoutChanged)
        area.verticalScrollBar().valueChanged.connect(self._on_value_changed)
        self._watch_content(area.widget())

    def set_chapter_widgets(self, widgets: Sequence[QtWidgets.QWidget]) -> None:
        self._widgets = list(widgets)
        self._watch_content(self._area.widget())
        self.layoutChanged.emit()

    def scroll_offset(self) -> float:
        return float(self._area.verticalScrollBar().value())

    def visible_height(self) -> float:
        return float(self._area.viewport().height())

    def extents(self) -> List[ChapterExtent]:
        content = self._area.widget()
        extents: List[ChapterExtent] = []
        for widget in self._widgets:
            if content is not None and widget is not content and content.isAncestorOf(widget):
                top = widget.mapTo(content, QtCore.QPoint(0, 0)).y()
            else:
                top = widget.y()
            height = 0 if widget.isHidden() else widget.height()
            extents.append(ChapterExtent(float(top), float(height)))
        return extents

    def eventFilter(self, watched: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if watched is self._content and event.type() in self._REFLOW_EVENTS:
            self._reflow_timer.start()
        return False

    def _watch_content(self, content: Optional[QtWidgets.QWidget]) -> None:
        if content is self._content:
            return
        if self._content is not None:
            self._content.removeEventFilter(self)
        self._content = content
        if content is not None:
            content.installEventFilter(self)

    def _on_value_changed(self, value: int) -> None:
        self.scrolled.emit(float(value))


class WidgetPanelSink(PanelSink):
    """Marks chapter panels with an ``active`` dynamic property for stylesheets."""

    PROPERTY = "active"

    def __init__(self, widgets: Sequence[QtWidgets.QWidget] = ()) -> None:
        self._widgets: List[QtWidgets.QWidget] = list(widgets)

    def set_widgets(self, widgets: Sequence[QtWidgets.QWidget]) -> None:
        self._widgets = list(widgets)

    def is_active(self, index: int) -> bool:
        if not 0 <= index < len(self._widgets):
            return False
        return bool(self._widgets[index].property(self.PROPERTY))

    def activate(self, index: int) -> None:
        self._set(index, True)

    def deactivate(self, index: int) -> None:
        self._set(index, False)

    def _set(self, index: int, active: bool) -> None:
        if not 0 <= index < len(self._widgets):
            return
        widget = self._widgets[index]
        if bool(widget.property(self.PROPERTY)) == active:
            return
        widget.setProperty(self.PROPERTY, active)
        style = widget.style()
        style.unpolish(widget)
        style.polish(widget)
        widget.update()
