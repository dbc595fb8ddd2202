"""Command router: resolves a transcript against the ledger's players and applies it.

The score command module provides:
    parse(text, players) -> Parse | None   # resolve player/combination/points
    handle(parse, ledger) -> str           # commit the score, return a confirmation

Unresolved transcripts are expected (recognizer noise, chatter at the table),
so they are only logged, never raised.
"""

import os
from datetime import datetime

from dicevoice.commands import score

# Log file: lives next to the dicevoice package directory
_LOG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "dicevoice.log")


def _log_request(text, parse, source="[voice]"):
    """Append a compact 2-line entry to the log file."""
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    if parse is None:
        parse_line = "  -> none"
    else:
        parts = [f"score.{parse.command}"]
        for k, v in parse.args.items():
            parts.append(f"{k}={v!r}")
        parse_line = f"  -> {', '.join(parts)}"
    try:
        with open(_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(f"{ts} {source}  {text}\n{parse_line}\n")
    except OSError:
        pass


def resolve(text, ledger):
    """Resolve text without changing anything. Returns a Parse or None."""
    return score.parse(text, ledger.registry)


def dispatch(text, ledger, source="[voice]"):
    """Resolve a transcript and, if it is a complete command, apply it.

    Args:
        text: Final transcript of one utterance.
        ledger: The Ledger to update.
        source: Source tag for logging, e.g. "[voice]" or "[text]".

    Returns:
        (response, parse): the confirmation text and the Parse, or
        (None, None) when the text did not resolve. Nothing changes in that case.
    """
    p = resolve(text, ledger)
    _log_request(text, p, source)
    if p is None:
        return None, None
    return score.handle(p, ledger), p
