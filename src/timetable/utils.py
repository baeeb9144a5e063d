"""Shared helpers for group keys and markup text extraction."""

from bs4 import Tag

# Latin letters with a Cyrillic look-alike, keyed upper-case
_LATIN_TO_CYRILLIC: dict[str, str] = {
    "A": "А",
    "B": "В",
    "C": "С",
    "E": "Е",
    "H": "Н",
    "K": "К",
    "M": "М",
    "O": "О",
    "P": "Р",
    "T": "Т",
    "X": "Х",
    "Y": "У",
}


def group_path(group_key: str) -> str:
    """Translate a caller-facing group key into the upstream path fragment.

    "ИС502.1" -> "ИС502/1"
    """
    return group_key.replace(".", "/")


def to_cyrillic(text: str) -> str:
    """Replace Latin look-alike letters (any case) with upper-case Cyrillic.

    Lets callers normalize group codes typed on a Latin keyboard before using
    them as cache keys. Other characters pass through unchanged.
    """
    return "".join(_LATIN_TO_CYRILLIC.get(ch.upper(), ch) for ch in text)


def node_text(node: Tag | None) -> str:
    """Concatenated text of a node, or "" when the node is absent."""
    return node.get_text() if node is not None else ""


def select_text(root: Tag, selector: str) -> str:
    """Trimmed text of the first `selector` match under `root`, or ""."""
    return node_text(root.select_one(selector)).strip()
