from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime

from .documents import Document


class DocumentCollection(Sequence[Document]):
    """Lightweight helper for working with lists of Documents in templates and code."""

    def __init__(self, documents: Iterable[Document]):
        self._documents = list(documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, item):
        return self._documents[item]

    def posts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.is_post)

    def pages(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.is_page)

    def with_keyword(self, keyword: str) -> DocumentCollection:
        wanted = keyword.lower()
        return DocumentCollection(
            d for d in self._documents if wanted in (k.lower() for k in d.keywords)
        )

    def drafts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.draft)

    def published(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if not d.draft)

    def sorted(self, reverse: bool = True) -> DocumentCollection:
        """Sort documents by date, then by URL.

        Undated documents sort as the oldest. The URL tie-breaker keeps the
        order stable between builds.

        Args:
            reverse: If True (default), newest first. If False, oldest first.

        Returns:
            A new DocumentCollection with sorted documents.
        """
        by_url = sorted(self._documents, key=lambda d: d.url)
        return DocumentCollection(
            sorted(by_url, key=lambda d: d.date or datetime.min, reverse=reverse)
        )

    def latest(self, count: int = 5) -> DocumentCollection:
        return DocumentCollection(self.sorted()[:count])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DocumentCollection({len(self._documents)} documents)"
