"""Search data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

from tfidf_search.search.errors import InvalidKeyError


@dataclass(slots=True)
class Document:
    """Per-document term statistics.

    ``term_count`` counts every scanned token including repeats, so it always
    equals ``sum(term_frequency.values())``.
    """

    term_count: int = 0
    term_frequency: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"term_count": self.term_count, "term_frequency": dict(self.term_frequency)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Document:
        return cls(
            term_count=int(data.get("term_count", 0)),
            term_frequency={str(term): int(freq) for term, freq in data.get("term_frequency", {}).items()},
        )


@dataclass(slots=True)
class Corpus:
    """All indexed documents plus the corpus-wide document frequency table."""

    documents: dict[str, Document] = field(default_factory=dict)
    document_frequency: dict[str, int] = field(default_factory=dict)

    @property
    def doc_count(self) -> int:
        return len(self.documents)

    def to_dict(self) -> dict[str, Any]:
        return {
            "documents": {path: document.to_dict() for path, document in self.documents.items()},
            "document_frequency": dict(self.document_frequency),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Corpus:
        documents = {str(path): Document.from_dict(raw) for path, raw in data.get("documents", {}).items()}
        document_frequency = {str(term): int(freq) for term, freq in data.get("document_frequency", {}).items()}
        return cls(documents=documents, document_frequency=document_frequency)


@dataclass(frozen=True, slots=True)
class RankedDocument:
    """A scored document returned by ``search_query``."""

    path: Path
    score: float


def normalize_key(path: str | os.PathLike[str]) -> str:
    """Return ``path`` as the string key both backends store.

    Non-UTF-8 filenames decoded with ``surrogateescape`` are rejected, since
    neither SQLite nor the JSON snapshot can hold them.
    """
    key = os.fspath(path)
    try:
        key.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidKeyError(f"document path {key!r} is not valid UTF-8") from exc
    return key
