"""Token prefix matching for command parsing.

A phrase like "короткий стрит" is tokenized once into a TokenPattern, then
checked against the start of a command's token list. A match is exact,
index-for-index token equality; there is no partial-token or substring matching.

Examples:
    >>> p = TokenPattern("короткий стрит")
    >>> p.match(["короткий", "стрит", "15"])
    2
    >>> p.match(["короткий", "15"])
    0
    >>> longest_match([("small", p), ("any", TokenPattern("короткий"))],
    ...               ["короткий", "стрит", "15"])
    ('small', 2)
"""

from dicevoice.commands.normalize import tokenize


def match_from_start(tokens, pattern):
    """Return len(pattern) if pattern is a prefix of tokens, else 0.

    An empty pattern, or one longer than tokens, never matches.
    """
    if not pattern or len(pattern) > len(tokens):
        return 0
    for i, word in enumerate(pattern):
        if tokens[i] != word:
            return 0
    return len(pattern)


class TokenPattern:
    """A phrase pre-split into tokens, matched against the start of a token list."""

    def __init__(self, phrase):
        self.phrase = phrase
        self.tokens = tuple(tokenize(phrase))

    def match(self, tokens):
        """Number of tokens consumed from the start of tokens, or 0."""
        return match_from_start(tokens, self.tokens)

    def __repr__(self):
        return f"TokenPattern({self.phrase!r})"


def longest_match(candidates, tokens):
    """Find the candidate that consumes the most tokens.

    Args:
        candidates: iterable of (tag, pattern) pairs, where pattern is a
            TokenPattern, a phrase string, or a sequence of tokens.
        tokens: the token list to match against.

    Returns:
        (tag, used) for the longest match, or None if nothing matched.
        Ties go to the candidate seen first.
    """
    best = None
    for tag, pattern in candidates:
        if isinstance(pattern, TokenPattern):
            used = pattern.match(tokens)
        elif isinstance(pattern, str):
            used = match_from_start(tokens, tokenize(pattern))
        else:
            used = match_from_start(tokens, pattern)
        if used > 0 and (best is None or used > best[1]):
            best = (tag, used)
    return best
