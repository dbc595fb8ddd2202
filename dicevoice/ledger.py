"""Score ledger: the live player registry plus undo/redo history.

History holds immutable snapshots (tuples of PlayerRow). Restoring one builds
new Player objects, so nothing in `past` or `future` is ever shared with the
live registry.

Usage:
    ledger = Ledger()
    ledger.add_player("Дима")
    ledger.apply_score("Дима", Combination.ONES, 5)
    ledger.undo()          # back to an empty score row
    ledger.redo()          # Дима has 5 in "1" again
"""

from dicevoice.commands.vocabulary import Combination
from dicevoice.players import PlayerRegistry, empty_scores


class Ledger:
    def __init__(self):
        self.registry = PlayerRegistry()
        self._past = []    # older -> newer; top is the state just before the last change
        self._future = []  # top is the most recently undone state

    # --- Queries ---

    @property
    def players(self):
        """Immutable rows for every player, in registration order."""
        return self.registry.snapshot()

    @property
    def history_depth(self):
        """(undo steps available, redo steps available)."""
        return len(self._past), len(self._future)

    @property
    def can_undo(self):
        return bool(self._past)

    @property
    def can_redo(self):
        return bool(self._future)

    def snapshot(self):
        return self.registry.snapshot()

    def total(self, name):
        """Sum of a player's recorded scores; absent scores count as zero."""
        player = self._require(name)
        return player.total

    # --- Mutations ---

    def _require(self, name):
        player = self.registry.find(name)
        if player is None:
            raise KeyError(f"No player named {name!r}")
        return player

    def _save_history(self):
        """Push the current state onto `past` and drop any redo states."""
        self._past.append(self.registry.snapshot())
        self._future.clear()

    def add_player(self, name):
        """Register a new player. Raises DuplicatePlayer with nothing changed."""
        name = self.registry.check_new(name)
        self._save_history()
        return self.registry.add(name)

    def apply_score(self, name, combination, points):
        """Set one score, overwriting any previous value."""
        player = self._require(name)
        combination = Combination(combination)
        points = int(points)
        self._save_history()
        player.scores[combination] = points

    def reset_scores(self):
        """Clear every score but keep the players."""
        self._save_history()
        for player in self.registry:
            player.scores = empty_scores()

    def new_game(self):
        """Forget all players and all history. Cannot be undone."""
        self.registry.clear()
        self._past.clear()
        self._future.clear()

    def undo(self):
        """Step back one change. Returns False if there is nothing to undo."""
        if not self._past:
            return False
        previous = self._past.pop()
        self._future.append(self.registry.snapshot())
        self.registry = PlayerRegistry.from_snapshot(previous)
        return True

    def redo(self):
        """Re-apply the last undone change. Returns False if there is none."""
        if not self._future:
            return False
        following = self._future.pop()
        self._past.append(self.registry.snapshot())
        self.registry = PlayerRegistry.from_snapshot(following)
        return True
