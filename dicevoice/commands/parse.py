"""Parse object for the command system.

score.parse(text, players) returns a Parse (or None).
The router logs it and passes it to score.handle(parse, ledger).
"""

from dataclasses import dataclass

from dicevoice.commands.vocabulary import Combination


@dataclass(frozen=True)
class Parse:
    player: str               # registered player name, as registered
    combination: Combination
    points: int
    used: int = 0             # tokens consumed from the command
    command: str = "set_score"

    @property
    def args(self):
        return {"player": self.player,
                "combination": self.combination.value,
                "points": self.points}
