"""Analyzer utilities that turn raw text into comparable terms.

This module mirrors Whoosh's composable tokenizer/filter design without
pulling in heavy dependencies. An index holds a single analyzer and uses it
for both documents and queries, so terms always compare equal when the
underlying words do.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
import re
from typing import Protocol


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str) -> list[str]:  # pragma: no cover - interface definition
        ...


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[str]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[str]) -> Iterator[str]:  # pragma: no cover - interface definition
        ...


class RegexTokenizer:
    """Regex-based tokenizer that yields word tokens."""

    def __init__(self, pattern: str = r"[\w']+", flags: int = re.UNICODE | re.MULTILINE) -> None:
        self.pattern = re.compile(pattern, flags)

    def __call__(self, text: str) -> Iterator[str]:
        for match in self.pattern.finditer(text):
            yield match.group(0)


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[str]) -> Iterator[str]:
        for token in tokens:
            yield token.lower()


DEFAULT_STOPWORDS = (
    "a",
    "an",
    "and",
    "are",
    "as",
    "at",
    "be",
    "but",
    "by",
    "for",
    "if",
    "in",
    "into",
    "is",
    "it",
    "no",
    "not",
    "of",
    "on",
    "or",
    "such",
    "that",
    "the",
    "their",
    "then",
    "there",
    "these",
    "they",
    "this",
    "to",
    "was",
    "will",
    "with",
)

_SUFFIX_RULES: tuple[tuple[str, str], ...] = (
    ("ization", "ize"),
    ("ational", "ate"),
    ("fulness", "ful"),
    ("ousness", "ous"),
    ("iveness", "ive"),
    ("tional", "tion"),
    ("biliti", "ble"),
    ("entli", "ent"),
    ("izer", "ize"),
    ("alli", "al"),
    ("ator", "ate"),
    ("ation", "ate"),
    ("ness", ""),
    ("ment", ""),
)

_SIMPLE_SUFFIXES: tuple[str, ...] = ("ingly", "edly", "ing", "ed", "ly", "es", "s")


class StopFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Sequence[str] | None = None) -> None:
        vocab = stopwords if stopwords is not None else DEFAULT_STOPWORDS
        self.stopwords = {word.lower() for word in vocab}

    def __call__(self, tokens: Iterable[str]) -> Iterator[str]:
        for token in tokens:
            if token.lower() not in self.stopwords:
                yield token


class PorterStemFilter:
    """Applies a minimal Porter-style stemming routine."""

    def __call__(self, tokens: Iterable[str]) -> Iterator[str]:
        for token in tokens:
            yield stem(token)


def stem(word: str) -> str:
    """Return a lowercase stem, leaving short words untouched."""

    lower = word.lower()
    return _strip_suffix(lower, _SUFFIX_RULES) or _strip_suffix(lower, ((s, "") for s in _SIMPLE_SUFFIXES)) or lower


def _strip_suffix(lower: str, rules: Iterable[tuple[str, str]]) -> str | None:
    for suffix, replacement in rules:
        if lower.endswith(suffix) and len(lower) - len(suffix) >= 2:
            candidate = lower[: -len(suffix)] + replacement
            if len(candidate) >= 2:
                return candidate
    return None


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[str]:
        stream: Iterable[str] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        return [token for token in stream if token]


class StandardAnalyzer:
    """Lowercasing analyzer with optional stopword removal and stemming.

    Stopwords are kept by default: every word counts toward a document's
    term count, and common words are already damped by their idf.
    """

    def __init__(
        self,
        *,
        stopwords: Sequence[str] | None = None,
        remove_stopwords: bool = False,
        apply_stemming: bool = True,
    ) -> None:
        filters: list[TokenFilter] = [LowercaseFilter()]
        if remove_stopwords:
            filters.append(StopFilter(stopwords))
        if apply_stemming:
            filters.append(PorterStemFilter())
        self.pipeline = AnalyzerPipeline(RegexTokenizer(), filters)

    def __call__(self, text: str) -> list[str]:
        return self.pipeline(text)


_ANALYZER_FACTORIES: dict[str, Callable[[], Analyzer]] = {
    "default": lambda: StandardAnalyzer(),
    "english": lambda: StandardAnalyzer(remove_stopwords=True),
    "english-nostem": lambda: StandardAnalyzer(remove_stopwords=True, apply_stemming=False),
    "simple": lambda: StandardAnalyzer(apply_stemming=False),
}


def available_analyzers() -> list[str]:
    return sorted(_ANALYZER_FACTORIES)


def get_analyzer(name: str | None) -> Analyzer:
    """Return analyzer by name, defaulting to the standard analyzer."""

    if name is None:
        return _ANALYZER_FACTORIES["default"]()
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {available_analyzers()}"
        raise ValueError(msg)
    return _ANALYZER_FACTORIES[normalized]()
