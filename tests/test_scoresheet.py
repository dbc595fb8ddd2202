"""End-to-end tests for ScoreSheet, the presentation-facing facade."""

import threading

import pytest

from dicevoice.commands.vocabulary import Combination
from dicevoice.errors import DuplicatePlayer, SpeechSourceUnavailable
from dicevoice.listener import SpeechEvent
from dicevoice.scoresheet import ScoreSheet


class FakeListener:
    def __init__(self, events=(), fail=None):
        self._events = list(events)
        self.fail = fail
        self.listening = False

    def start(self):
        if self.fail is not None:
            raise self.fail
        self.listening = True

    def stop(self):
        self.listening = False

    def events(self):
        for event in self._events:
            if not self.listening:
                break
            if event.kind == "error":
                self.listening = False
            yield event
        self.listening = False
        yield SpeechEvent("end")


@pytest.fixture
def views():
    return []


@pytest.fixture
def sheet(views):
    return ScoreSheet(on_change=views.append)


def test_scenario_single_number(sheet):
    sheet.add_player("Дима")
    p = sheet.apply_command("Дима единицы 5")
    assert (p.player, p.combination, p.points) == ("Дима", Combination.ONES, 5)
    row = sheet.view().players[0]
    assert row.get(Combination.ONES) == 5


def test_scenario_four_of_a_kind_total(sheet):
    sheet.add_player("Андрей")
    p = sheet.apply_command("Андрей каре 25")
    assert p.combination is Combination.FOUR_OF_A_KIND
    assert sheet.view().totals == {"Андрей": 25}


def test_scenario_unknown_player(sheet, views):
    sheet.add_player("Дима")
    before = sheet.view()
    assert sheet.apply_command("Вася единицы 5") is None
    after = sheet.view()
    assert after.players == before.players
    assert (after.undo_depth, after.redo_depth) == (before.undo_depth, before.redo_depth)
    assert after.last_raw == "Вася единицы 5"
    assert after.last_parse is None


def test_scenario_apply_undo_redo(sheet):
    sheet.add_player("Дима")
    sheet.apply_command("Дима единицы 5")
    view = sheet.view()
    assert sheet.undo()
    assert sheet.view().players[0].get(Combination.ONES) is None
    assert sheet.redo()
    final = sheet.view()
    assert final.players[0].get(Combination.ONES) == 5
    assert (final.undo_depth, final.redo_depth) == (view.undo_depth, view.redo_depth)


def test_longer_name_wins(sheet):
    sheet.add_player("Анна")
    sheet.add_player("Анна Мария")
    p = sheet.apply_command("Анна Мария покер 50")
    assert p.player == "Анна Мария"
    assert sheet.view().totals == {"Анна": 0, "Анна Мария": 50}


def test_duplicate_player(sheet):
    sheet.add_player("Анна")
    with pytest.raises(DuplicatePlayer):
        sheet.add_player("анна")
    view = sheet.view()
    assert [row.name for row in view.players] == ["Анна"]
    assert view.undo_depth == 1
    assert "Анна" in view.notice


def test_reset_scores_zero_totals(sheet):
    for name in ["Дима", "Андрей"]:
        sheet.add_player(name)
    sheet.apply_command("Дима шестёрки 24")
    sheet.apply_command("Андрей любая 22")
    sheet.reset_scores()
    assert sheet.view().totals == {"Дима": 0, "Андрей": 0}


def test_new_game(sheet):
    sheet.add_player("Дима")
    sheet.apply_command("Дима единицы 5")
    sheet.new_game()
    view = sheet.view()
    assert view.players == ()
    assert not view.can_undo and not view.can_redo
    assert view.last_raw == ""
    assert sheet.undo() is False


def test_on_change_receives_views(sheet, views):
    sheet.add_player("Дима")
    sheet.apply_command("Дима двойки 8")
    sheet.undo()
    assert len(views) == 3
    assert views[1].last_parse.points == 8
    assert views[2].players[0].total == 0
    assert views[2].can_redo


def test_undo_redo_without_history_do_not_notify(sheet, views):
    assert sheet.undo() is False
    assert sheet.redo() is False
    assert views == []


def test_start_listening_unavailable(views):
    sheet = ScoreSheet(listener=FakeListener(fail=SpeechSourceUnavailable("No microphone found.")),
                       on_change=views.append)
    with pytest.raises(SpeechSourceUnavailable):
        sheet.start_listening()
    assert not sheet.listening
    assert sheet.view().notice == "No microphone found."


def test_listen_applies_transcripts():
    listener = FakeListener([
        SpeechEvent("transcript", "Дима единицы 5"),
        SpeechEvent("transcript", "какой-то шум"),
        SpeechEvent("transcript", "Дима каре 20"),
    ])
    sheet = ScoreSheet(listener=listener)
    sheet.add_player("Дима")
    sheet.start_listening()
    assert sheet.view().listening
    sheet.listen()
    view = sheet.view()
    assert view.totals == {"Дима": 25}
    assert view.last_raw == "Дима каре 20"
    assert not view.listening


def test_recognition_error_sets_notice():
    listener = FakeListener([
        SpeechEvent("transcript", "Дима единицы 5"),
        SpeechEvent("error", "network"),
        SpeechEvent("transcript", "Дима каре 20"),
    ])
    sheet = ScoreSheet(listener=listener)
    sheet.add_player("Дима")
    sheet.start_listening()
    sheet.listen()
    view = sheet.view()
    assert view.totals == {"Дима": 5}
    assert "network" in view.notice
    assert not view.listening


def test_stop_listening(views):
    sheet = ScoreSheet(listener=FakeListener(), on_change=views.append)
    sheet.start_listening()
    sheet.stop_listening()
    assert not sheet.listening
    assert views[-1].listening is False


def test_listen_without_listener_is_noop(sheet, views):
    sheet.listen()
    assert views == []
    assert not sheet.listening


def test_resolved_command_clears_recognition_notice():
    listener = FakeListener([
        SpeechEvent("error", "boom"),
    ])
    sheet = ScoreSheet(listener=listener)
    sheet.add_player("Дима")
    sheet.start_listening()
    sheet.listen()
    assert "boom" in sheet.view().notice

    sheet.apply_command("какой-то шум")
    assert "boom" in sheet.view().notice
    sheet.apply_command("Дима единицы 5")
    assert sheet.view().notice is None


def _lock_free_elsewhere(lock):
    """True if another thread can take the lock right now."""
    result = []

    def try_acquire():
        got = lock.acquire(blocking=False)
        if got:
            lock.release()
        result.append(got)

    t = threading.Thread(target=try_acquire)
    t.start()
    t.join()
    return result[0]


def test_stop_and_end_notify_under_lock():
    seen = []
    sheet = ScoreSheet(listener=FakeListener())
    sheet.on_change = lambda view: seen.append(_lock_free_elsewhere(sheet._lock))
    sheet.start_listening()
    sheet.stop_listening()
    sheet.handle_event(SpeechEvent("end"))
    assert seen == [False, False, False]
