"""Text normalization for recognized speech.

Turns a raw transcript into a canonical, lower-case, space-separated string
and splits it into tokens. Everything downstream compares tokens for exact
equality, so all cleanup happens here.

Examples:
    >>> normalize("  Дима: «Единицы», 5!  ")
    'дима единицы 5'
    >>> tokenize("Фулл-хаус")
    ['фулл', 'хаус']
"""

import re
import unicodedata

# Punctuation that speech recognizers sprinkle into transcripts
_PUNCT_RE = re.compile(r"[()\"'«»:,.;!?]")

# En dash, em dash, hyphen, underscore
_DASH_RE = re.compile(r"[–—\-_]")

_SPACE_RE = re.compile(r"\s+")


def _fold(text):
    """Lower-case and NFKC-normalize until neither changes the string."""
    s = text
    while True:
        folded = unicodedata.normalize("NFKC", s.lower())
        if folded == s:
            return s
        s = folded


def normalize(text):
    """Return the canonical form of text (see module docstring)."""
    s = _fold(text)
    s = _PUNCT_RE.sub(" ", s)
    s = _DASH_RE.sub(" ", s)
    s = _SPACE_RE.sub(" ", s)
    return s.strip()


def tokenize(text):
    """Normalize text and split it into tokens. Empty input gives []."""
    return [t for t in normalize(text).split(" ") if t]
