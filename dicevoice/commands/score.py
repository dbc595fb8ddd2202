"""Score command: "<player> <combination> <points>".

Handles:
    "Дима единицы 5"
    "Андрей каре 25"
    "Анна Мария фулл-хаус тридцать"
    "Петя пять одинаковых 50"

Resolution runs three stages over the token list, each consuming a prefix:
the player name, then a combination alias, then one points token. Player names
and aliases both use longest match, earliest candidate on ties. If any stage
fails the whole command is ignored.
"""

from dicevoice.commands.normalize import tokenize
from dicevoice.commands.parse import Parse
from dicevoice.commands.prefix import TokenPattern, longest_match
from dicevoice.commands.vocabulary import COMBINATIONS, COMBO_ALIASES, NUMBER_WORDS

# (Combination, TokenPattern) in combination order, then alias order
_COMBO_PATTERNS = [
    (combo, TokenPattern(alias))
    for combo in COMBINATIONS
    for alias in COMBO_ALIASES[combo]
]


def _pick_player(names, tokens):
    return longest_match(((name, tokenize(name)) for name in names), tokens)


def _pick_combination(tokens):
    return longest_match(_COMBO_PATTERNS, tokens)


def _pick_points(tokens):
    """Read points from the first token only. Returns (points, 1) or None."""
    if not tokens:
        return None
    token = tokens[0]
    if token.isascii() and token.isdigit():
        return int(token), 1
    if token in NUMBER_WORDS:
        return NUMBER_WORDS[token], 1
    return None


def parse(text, players):
    """Resolve a spoken command against the registered players.

    Args:
        text: raw transcript, or an already tokenized list.
        players: registered players (Player objects or plain names), in
            registration order.

    Returns:
        Parse, or None if the player, combination or points can't be found.
    """
    tokens = tokenize(text) if isinstance(text, str) else list(text)
    names = [getattr(p, "name", p) for p in players]

    picked_player = _pick_player(names, tokens)
    if picked_player is None:
        return None
    name, used = picked_player
    rest = tokens[used:]

    picked_combo = _pick_combination(rest)
    if picked_combo is None:
        return None
    combo, combo_used = picked_combo
    rest = rest[combo_used:]

    picked_points = _pick_points(rest)
    if picked_points is None:
        return None
    points, points_used = picked_points

    return Parse(player=name, combination=combo, points=points,
                 used=used + combo_used + points_used)


def handle(p, ledger):
    """Write the parsed score into the ledger. Returns a short confirmation."""
    ledger.apply_score(p.player, p.combination, p.points)
    total = ledger.total(p.player)
    return f"{p.player}: {p.combination.value} = {p.points} (итого {total})"
