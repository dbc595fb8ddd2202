"""Tests for the console front end in text mode."""

import io

from dicevoice.commands.vocabulary import COMBINATIONS
from dicevoice.main import format_table, run_text


def test_run_text_session(capsys):
    lines = io.StringIO(
        "Дима единицы 5\n"
        "Андрей каре 25\n"
        "что-то непонятное\n"
        "/add Анна\n"
        "/add анна\n"
        "/undo\n"
        "/redo\n"
        "/quit\n"
        "Дима двойки 4\n"
    )
    sheet = run_text(["Дима", "Андрей"], stream=lines)
    view = sheet.view()
    assert view.totals == {"Дима": 5, "Андрей": 25, "Анна": 0}
    out = capsys.readouterr().out
    assert "(not understood)" in out
    assert "already exists" in out


def test_format_table():
    sheet = run_text(["Дима"], stream=io.StringIO("Дима покер 50\n"))
    table = format_table(sheet.view()).splitlines()
    assert "Дима" in table[0]
    assert len(table) == 2 + len(COMBINATIONS) + 1
    assert table[-1].startswith("Итого")
    assert table[-1].endswith("50")
