"""Markup stripping that remembers where each plain-text character came from."""

import html
import re
from dataclasses import dataclass, field

# Script and style bodies are dropped together with their tags.
_MARKUP_RE = re.compile(
    r"(?P<tag><(?P<raw>script|style)\b[^>]*>.*?</(?P=raw)\s*>|<[^>]*>)"
    r"|(?P<entity>&(?:#\d+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);)",
    flags=re.I | re.S,
)


@dataclass
class StrippedText:
    """Plain text plus the raw ``(start, end)`` span of every character."""

    text: str = ""
    spans: list[tuple[int, int]] = field(default_factory=list)

    def raw_span(self, index: int) -> tuple[int, int]:
        """Return the span in the original markup for plain-text ``index``."""
        return self.spans[index]


def strip_with_offsets(markup: str) -> StrippedText:
    """Remove tags, decode entities and keep a per-character offset map.

    Entities decode to one or more characters that all map back to the
    whole entity span, so ``raw[start:end]`` always yields the source of
    the character.
    """
    pieces: list[str] = []
    spans: list[tuple[int, int]] = []
    pos = 0

    for match in _MARKUP_RE.finditer(markup):
        pieces.append(markup[pos:match.start()])
        spans.extend((i, i + 1) for i in range(pos, match.start()))
        if match.group("entity"):
            decoded = html.unescape(match.group("entity"))
            pieces.append(decoded)
            spans.extend([(match.start(), match.end())] * len(decoded))
        pos = match.end()

    pieces.append(markup[pos:])
    spans.extend((i, i + 1) for i in range(pos, len(markup)))
    return StrippedText("".join(pieces), spans)


def strip_markup(markup: str) -> str:
    """Return ``markup`` as plain text."""
    if not markup:
        return ""
    return strip_with_offsets(markup).text
