"""HTML rendering of event text for web clients.

Event descriptions from the catalog are plain text, so the renderer runs
markdown-it with the ``zero`` preset: only paragraphs and escaped text, no
emphasis, links, lists or raw HTML. Literal ``*``, ``_`` or ``<`` in an event
reach the client unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts event text into HTML fragments."""

    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = MarkdownIt("zero")

    def render_fragment(self, text: str) -> str:
        """Render text into an escaped HTML paragraph fragment."""

        sanitized = text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)


renderer = MarkdownRenderer()
# MarkdownIt is safe for concurrent read-only renders, so one instance is shared.
