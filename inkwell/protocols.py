"""Protocol definitions for Inkwell.

These protocols describe the seams where alternative implementations can be
plugged in: content renderers and template renderers.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .documents import Document


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for rendering a document body to HTML.

    Implementations handle one source format (Markdown, HTML).
    """

    @abstractmethod
    def can_render(self, path: Path) -> bool:
        """Check if this renderer can handle the given file.

        Args:
            path: Path to the source file.

        Returns:
            True if this renderer can process the file.
        """
        ...

    @abstractmethod
    def render(self, content: str) -> str:
        """Render a document body to HTML.

        Args:
            content: Body text, without front matter.

        Returns:
            Rendered HTML.
        """
        ...

    @property
    @abstractmethod
    def source_type(self) -> str:
        """Return the source type identifier (e.g., 'markdown', 'html')."""
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Protocol for wrapping rendered bodies in layouts."""

    @abstractmethod
    def render_document(self, document: Document, content: str) -> str:
        """Render a document body inside its layout.

        Args:
            document: Document being rendered.
            content: Body HTML.

        Returns:
            Complete HTML page.
        """
        ...

    @abstractmethod
    def render_body(self, document: Document, content: str) -> str:
        """Render an HTML body as a template before it enters its layout."""
        ...
