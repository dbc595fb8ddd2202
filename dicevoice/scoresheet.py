"""ScoreSheet: the one object a presentation layer talks to.

Wraps the ledger, the command router and the speech listener. Every change is
made under one lock, and after each one the on_change callback receives a fresh
SheetView: an immutable picture of the table, the history depth, the listening
state, the last heard and last resolved command, and any notice to show.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from dicevoice.commands import router
from dicevoice.commands.parse import Parse
from dicevoice.errors import DuplicatePlayer, SpeechSourceUnavailable
from dicevoice.ledger import Ledger


@dataclass(frozen=True)
class SheetView:
    players: tuple               # PlayerRow per player, in column order
    undo_depth: int
    redo_depth: int
    listening: bool = False
    last_raw: str = ""
    last_parse: Optional[Parse] = None
    notice: Optional[str] = None

    @property
    def can_undo(self):
        return self.undo_depth > 0

    @property
    def can_redo(self):
        return self.redo_depth > 0

    @property
    def totals(self):
        return {row.name: row.total for row in self.players}


class ScoreSheet:
    def __init__(self, ledger=None, listener=None, on_change=None):
        self.ledger = ledger if ledger is not None else Ledger()
        self.listener = listener
        self.on_change = on_change
        self.last_raw = ""
        self.last_parse = None
        self.notice = None
        self._lock = threading.RLock()

    # --- Queries ---

    @property
    def listening(self):
        return self.listener is not None and self.listener.listening

    def view(self):
        past, future = self.ledger.history_depth
        return SheetView(
            players=self.ledger.players,
            undo_depth=past,
            redo_depth=future,
            listening=self.listening,
            last_raw=self.last_raw,
            last_parse=self.last_parse,
            notice=self.notice,
        )

    def _changed(self):
        if self.on_change is not None:
            self.on_change(self.view())

    # --- Commands ---

    def add_player(self, name):
        """Add a player column.

        Raises:
            DuplicatePlayer: the name is taken (ignoring case). Nothing changes
                except the notice.
            ValueError: the name is empty or has nothing that can be spoken.
        """
        with self._lock:
            try:
                self.ledger.add_player(name)
            except DuplicatePlayer as e:
                self.notice = str(e)
                self._changed()
                raise
            self.notice = None
            self._changed()

    def apply_command(self, raw, source="[voice]"):
        """Resolve one transcript and apply it. Returns the Parse or None."""
        with self._lock:
            self.last_raw = raw.strip()
            response, p = router.dispatch(raw, self.ledger, source=source)
            if p is not None:
                self.last_parse = p
                self.notice = None
            self._changed()
            return p

    def reset_scores(self):
        with self._lock:
            self.ledger.reset_scores()
            self._changed()

    def new_game(self):
        with self._lock:
            self.ledger.new_game()
            self.last_raw = ""
            self.last_parse = None
            self._changed()

    def undo(self):
        with self._lock:
            if self.ledger.undo():
                self._changed()
                return True
            return False

    def redo(self):
        with self._lock:
            if self.ledger.redo():
                self._changed()
                return True
            return False

    # --- Speech ---

    def start_listening(self):
        """Start the speech source.

        Raises:
            SpeechSourceUnavailable: also recorded as the notice.
        """
        if self.listener is None:
            from dicevoice.listener import SpeechListener
            self.listener = SpeechListener()
        with self._lock:
            try:
                self.listener.start()
            except SpeechSourceUnavailable as e:
                self.notice = str(e)
                self._changed()
                raise
            self.notice = None
            self._changed()

    def stop_listening(self):
        with self._lock:
            if self.listener is not None and self.listener.listening:
                self.listener.stop()
                self._changed()

    def handle_event(self, event):
        """Apply one SpeechEvent. Returns the Parse for resolved transcripts."""
        if event.kind == "transcript":
            return self.apply_command(event.text)
        if event.kind == "error":
            with self._lock:
                self.notice = f"Ошибка распознавания речи: {event.text}"
                self._changed()
        elif event.kind == "end":
            with self._lock:
                self._changed()
        return None

    def listen(self):
        """Consume speech events until the listener stops. No-op without a listener."""
        if self.listener is None:
            return
        for event in self.listener.events():
            self.handle_event(event)
