"""Glyph lookup from icon-font stylesheets.

Icon fonts such as Font Awesome or Bootstrap Icons publish a stylesheet
that maps CSS classes to codepoints:

    .fa-address-card:before { content: "\\f2bb"; }
    .fas { font-family: "Font Awesome 5 Free"; font-weight: 900; }

`CssGlyphMap` reads those rules so an icon class string such as
"fas fa-address-card" can be turned into the character to draw and the
font weight to draw it with.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_RULE_RE = re.compile(r"([^{}]+)\{([^{}]*)\}")
_PSEUDO_RE = re.compile(r"\.([\w-]+)::?before$")
_CLASS_RE = re.compile(r"\.([\w-]+)$")
_CONTENT_RE = re.compile(r"content\s*:\s*(['\"])(.*?)\1")
_WEIGHT_RE = re.compile(r"font-weight\s*:\s*([\w-]+)")
_ESCAPE_RE = re.compile(r"\\([0-9a-fA-F]{1,6})\s?|\\(.)")

_NAMED_WEIGHTS = {"normal": 400, "bold": 700}
DEFAULT_WEIGHT = 400


@dataclass(frozen=True)
class GlyphInfo:
    """Character and weight for an icon class."""
    codepoint: str
    font_weight: int


def _unescape(value):
    def repl(m):
        if m.group(1):
            return chr(int(m.group(1), 16))
        return m.group(2)
    return _ESCAPE_RE.sub(repl, value)


def _parse_weight(value):
    if value.isdigit():
        return int(value)
    return _NAMED_WEIGHTS.get(value.lower())


class CssGlyphMap:
    """Glyph metrics provider backed by an icon-font stylesheet."""

    def __init__(self, contents=None, weights=None):
        self.contents = dict(contents or {})
        self.weights = dict(weights or {})

    @classmethod
    def from_string(cls, css):
        contents = {}
        weights = {}
        css = _COMMENT_RE.sub("", css)
        for selectors, body in _RULE_RE.findall(css):
            content = _CONTENT_RE.search(body)
            weight = _WEIGHT_RE.search(body)
            for selector in selectors.split(","):
                selector = selector.strip()
                m = _PSEUDO_RE.search(selector)
                if m and content:
                    contents[m.group(1)] = _unescape(content.group(2))
                    continue
                m = _CLASS_RE.fullmatch(selector)
                if m and weight:
                    parsed = _parse_weight(weight.group(1))
                    if parsed is not None:
                        weights[m.group(1)] = parsed
        logger.debug("Parsed %d glyphs and %d weights from stylesheet",
                     len(contents), len(weights))
        return cls(contents, weights)

    @classmethod
    def from_file(cls, path):
        return cls.from_string(Path(path).read_text(encoding="utf-8"))

    def lookup(self, class_name):
        """Resolve a space-separated class string to a GlyphInfo.

        Returns None if none of the classes defines a glyph.
        """
        codepoint = None
        weight = None
        for token in class_name.split():
            if token in self.contents:
                codepoint = self.contents[token]
            if weight is None and token in self.weights:
                weight = self.weights[token]
        if codepoint is None:
            return None
        return GlyphInfo(codepoint, weight if weight is not None else DEFAULT_WEIGHT)

    __call__ = lookup

    def __len__(self):
        return len(self.contents)

    def __contains__(self, class_name):
        return class_name in self.contents
