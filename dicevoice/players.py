"""Players and the ordered player registry.

Registration order matters twice: it is the column order of the score sheet,
and it breaks ties when two player names match the same number of tokens.
"""

from dataclasses import dataclass, field

from dicevoice.commands.normalize import tokenize
from dicevoice.commands.vocabulary import COMBINATIONS
from dicevoice.errors import DuplicatePlayer


def empty_scores():
    """A fresh score row with every combination absent."""
    return {c: None for c in COMBINATIONS}


@dataclass
class Player:
    name: str
    scores: dict = field(default_factory=empty_scores)  # Combination -> int | None

    @property
    def total(self):
        return sum(v for v in self.scores.values() if v is not None)


@dataclass(frozen=True)
class PlayerRow:
    """Immutable copy of a Player, used for history snapshots and views."""

    name: str
    scores: tuple  # (Combination, int | None) pairs in combination order

    @classmethod
    def of(cls, player):
        return cls(player.name, tuple((c, player.scores.get(c)) for c in COMBINATIONS))

    def to_player(self):
        return Player(self.name, dict(self.scores))

    def get(self, combination):
        return dict(self.scores).get(combination)

    @property
    def total(self):
        return sum(v for _, v in self.scores if v is not None)


class PlayerRegistry:
    """Ordered, case-insensitively unique collection of players."""

    def __init__(self, players=()):
        self._players = list(players)

    def __iter__(self):
        return iter(self._players)

    def __len__(self):
        return len(self._players)

    def __repr__(self):
        return f"PlayerRegistry({[p.name for p in self._players]!r})"

    @property
    def names(self):
        return [p.name for p in self._players]

    def find(self, name):
        """Return the player with exactly this name, or None."""
        for p in self._players:
            if p.name == name:
                return p
        return None

    def check_new(self, name):
        """Validate a name for registration. Returns the cleaned name.

        Raises:
            ValueError: the name is empty, or has no letters or digits to match.
            DuplicatePlayer: the name collides with an existing player, ignoring case.
        """
        name = name.strip()
        if not name:
            raise ValueError("Player name must not be empty")
        if not tokenize(name):
            raise ValueError(f"Player name {name!r} has nothing that can be spoken")
        lowered = name.lower()
        for p in self._players:
            if p.name.lower() == lowered:
                raise DuplicatePlayer(name, p.name)
        return name

    def add(self, name):
        """Append a new player with an empty score row and return it."""
        player = Player(self.check_new(name))
        self._players.append(player)
        return player

    def clear(self):
        self._players.clear()

    def snapshot(self):
        """Immutable copy of every player, in order."""
        return tuple(PlayerRow.of(p) for p in self._players)

    @classmethod
    def from_snapshot(cls, rows):
        return cls(row.to_player() for row in rows)
