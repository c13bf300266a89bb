"""
Drawing surface — an in-memory SVG element tree plus the shared tooltip.

``DrawingSurface`` is the handle for the chart mount point (``div#chart``).
The renderer is its only writer: it clears the surface and rebuilds the
whole subtree on every draw, so no diffing is needed.

Elements are built with a small chainable API::

    rect = svg.append("rect").attr("x", 10).attr("class", "bar")
    rect.on("mouseover", handler)

Event handlers are kept on the element but never serialised; the surface
can replay pointer events through ``dispatch()``.
"""

from __future__ import annotations

import html
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from utils.formatting import format_px

SVG_NS = "http://www.w3.org/2000/svg"

# HTML elements that may not be written self-closing
_HTML_CONTAINERS = frozenset({"div", "span", "p"})


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """Pointer position in page coordinates."""

    page_x: float
    page_y: float


Handler = Callable[["PointerEvent | None", "SvgElement"], None]


def _attr_text(value: Any) -> str:
    if isinstance(value, float):
        return format_px(value)
    return str(value)


@dataclass(eq=False)
class SvgElement:
    """One node in the drawing tree."""

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[SvgElement] = field(default_factory=list)
    content: str | None = None
    handlers: dict[str, Handler] = field(default_factory=dict)
    # Data point bound to this node by the renderer
    datum: Any = None

    # ── building ──────────────────────────────────────────────────────────

    def append(self, tag: str) -> SvgElement:
        child = SvgElement(tag=tag)
        self.children.append(child)
        return child

    def attr(self, name: str, value: Any) -> SvgElement:
        self.attrs[name] = _attr_text(value)
        return self

    def text(self, value: str) -> SvgElement:
        self.content = value
        return self

    def on(self, event: str, handler: Handler) -> SvgElement:
        self.handlers[event] = handler
        return self

    def remove_children(self) -> None:
        self.children.clear()

    # ── querying ──────────────────────────────────────────────────────────

    def get(self, name: str) -> str | None:
        return self.attrs.get(name)

    def iter(self) -> Iterator[SvgElement]:
        """Depth-first walk over this element and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter()

    def select_all(self, tag: str) -> list[SvgElement]:
        """Descendants (not self) with the given tag, in document order."""
        return [el for el in self.iter() if el is not self and el.tag == tag]

    def find_by_id(self, element_id: str) -> SvgElement | None:
        for el in self.iter():
            if el.attrs.get("id") == element_id:
                return el
        return None

    # ── output ────────────────────────────────────────────────────────────

    def to_markup(self) -> str:
        attrs = "".join(
            f' {name}="{html.escape(value, quote=True)}"'
            for name, value in self.attrs.items()
        )
        if not self.children and self.content is None and self.tag not in _HTML_CONTAINERS:
            return f"<{self.tag}{attrs}/>"
        inner = "".join(child.to_markup() for child in self.children)
        if self.content is not None:
            inner = html.escape(self.content, quote=False) + inner
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


class DrawingSurface:
    """Exclusive-write handle on the chart mount point."""

    def __init__(self, mount_id: str = "chart") -> None:
        self.root = SvgElement(tag="div", attrs={"id": mount_id})

    def clear(self) -> None:
        """Remove everything under the mount point."""
        self.root.remove_children()

    def append_svg(self, width: float, height: float) -> SvgElement:
        return (
            self.root.append("svg")
            .attr("xmlns", SVG_NS)
            .attr("width", width)
            .attr("height", height)
        )

    @property
    def svg(self) -> SvgElement | None:
        for child in self.root.children:
            if child.tag == "svg":
                return child
        return None

    def rects(self) -> list[SvgElement]:
        return self.root.select_all("rect")

    def bar_for_date(self, iso_date: str) -> SvgElement | None:
        for rect in self.rects():
            if rect.get("data-date") == iso_date:
                return rect
        return None

    def dispatch(self, element: SvgElement, event: str,
                 pointer: PointerEvent | None = None) -> bool:
        """Invoke *element*'s handler for *event*; False if none is attached."""
        handler = element.handlers.get(event)
        if handler is None:
            return False
        handler(pointer, element)
        return True

    def to_svg(self) -> str:
        """Serialised ``<svg>`` document, or an empty string before a draw."""
        svg = self.svg
        return svg.to_markup() if svg is not None else ""

    def to_html(self) -> str:
        return self.root.to_markup()


@dataclass
class TooltipState:
    """The single floating tooltip element.

    Hidden by default; only the hover handlers mutate it.
    """

    element_id: str = "tooltip"
    visible: bool = False
    markup: str = ""
    data_date: str | None = None
    left: float | None = None
    top: float | None = None

    def show(self, markup: str, data_date: str) -> None:
        self.visible = True
        self.markup = markup
        self.data_date = data_date

    def move_to(self, left: float, top: float) -> None:
        self.left = left
        self.top = top

    def hide(self) -> None:
        self.visible = False

    def style(self) -> str:
        parts = ["position: absolute", f"display: {'block' if self.visible else 'none'}"]
        if self.top is not None:
            parts.append(f"top: {format_px(self.top)}px")
        if self.left is not None:
            parts.append(f"left: {format_px(self.left)}px")
        return "; ".join(parts)

    def to_html(self) -> str:
        """``<div id="tooltip">`` markup; ``markup`` is trusted renderer output."""
        date_attr = (
            f' data-date="{html.escape(self.data_date, quote=True)}"'
            if self.data_date else ""
        )
        return (
            f'<div id="{html.escape(self.element_id, quote=True)}"'
            f'{date_attr} style="{self.style()}">{self.markup}</div>'
        )
