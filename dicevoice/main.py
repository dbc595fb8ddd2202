"""Voice score sheet main loop.

Adds the players named on the command line, then listens for commands like
"Дима единицы 5" and prints the table after every change.

Usage:
    python -m dicevoice Дима Андрей          # voice
    python -m dicevoice -text Дима Андрей    # type transcripts instead
"""

import sys
import time

from dicevoice.commands.vocabulary import COMBINATIONS
from dicevoice.errors import ScoreSheetError, SpeechSourceUnavailable
from dicevoice.listener import SpeechListener
from dicevoice.scoresheet import ScoreSheet

_TEXT_HELP = "/add Имя, /undo, /redo, /reset, /new, /quit"


def log(msg):
    print(msg, flush=True)


def format_table(view):
    """Render a SheetView as a plain-text table."""
    label_w = max(len("Итого"), max(len(c.value) for c in COMBINATIONS))
    names = [row.name for row in view.players]
    widths = [max(len(n), 4) for n in names]

    def line(label, cells):
        parts = [label.ljust(label_w)] + [c.rjust(w) for c, w in zip(cells, widths)]
        return " | ".join(parts)

    lines = [line("Комбинация", names) if names else "Комбинация"]
    lines.append("-" * len(lines[0]))
    for combo in COMBINATIONS:
        cells = []
        for row in view.players:
            v = row.get(combo)
            cells.append("" if v is None else str(v))
        lines.append(line(combo.value, cells))
    lines.append(line("Итого", [str(row.total) for row in view.players]))
    return "\n".join(lines)


def _show(view):
    log("")
    log(format_table(view))
    if view.last_raw:
        log(f"  Последняя команда: \"{view.last_raw}\"")
    if view.notice:
        log(f"  ! {view.notice}")
    log(f"  undo={view.undo_depth} redo={view.redo_depth}")


def _add_players(sheet, names):
    for name in names:
        try:
            sheet.add_player(name)
        except (ScoreSheetError, ValueError) as e:
            log(f"  {e}")


def run_text(names, stream=None):
    """Read transcripts from stdin, one per line. Lines starting with / are sheet commands."""
    stream = stream or sys.stdin
    sheet = ScoreSheet(on_change=_show)
    _add_players(sheet, names)
    log(f"Type a command, e.g. \"Дима единицы 5\". Also: {_TEXT_HELP}")

    for raw in stream:
        text = raw.strip()
        if not text:
            continue
        if not text.startswith("/"):
            if sheet.apply_command(text, source="[text]") is None:
                log("  (not understood)")
            continue

        cmd, _, arg = text[1:].partition(" ")
        if cmd == "add":
            _add_players(sheet, [arg])
        elif cmd == "undo":
            sheet.undo()
        elif cmd == "redo":
            sheet.redo()
        elif cmd == "reset":
            sheet.reset_scores()
        elif cmd == "new":
            sheet.new_game()
        elif cmd == "quit":
            break
        else:
            log(f"  Commands: {_TEXT_HELP}")
    return sheet


def run_voice(names):
    log("Loading speech models...")
    t0 = time.time()
    sheet = ScoreSheet(listener=SpeechListener(log=log), on_change=_show)
    _add_players(sheet, names)

    try:
        sheet.start_listening()
    except SpeechSourceUnavailable as e:
        log(f"Speech input unavailable: {e}")
        return sheet
    log(f"  ready ({time.time() - t0:.1f}s)")
    log("Listening... say \"<Имя> <Комбинация> <Очки>\". Ctrl+C to quit.\n")

    try:
        sheet.listen()
    except KeyboardInterrupt:
        log("\nShutting down.")
    finally:
        sheet.stop_listening()
    return sheet


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == "-text":
        run_text(args[1:])
    else:
        run_voice(args)


if __name__ == "__main__":
    main()
