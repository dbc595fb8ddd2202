"""Tests for SpeechListener, with a fake stream, recorder and transcriber.

No audio device or speech model is touched.
"""

import pytest

from dicevoice.errors import SpeechRecognitionError, SpeechSourceUnavailable
from dicevoice.listener import SpeechEvent, SpeechListener


class FakeStream:
    def __init__(self):
        self.active = True
        self.stopped = False
        self.closed = False

    def stop(self):
        self.stopped = True

    def close(self):
        self.closed = True


class FakeRecorder:
    """Treats every non-empty chunk as a complete utterance."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.samples = []
        self.done = False

    def process(self, data):
        self.samples.extend(data)
        self.done = bool(self.samples)

    def get_result(self):
        return list(self.samples) or None


class FakeBackend:
    def __init__(self, transcripts=(), error=None):
        self.transcripts = list(transcripts)
        self.error = error
        self.callback = None
        self.stream = FakeStream()
        self.heard = []

    def open_stream(self, callback):
        self.callback = callback
        return self.stream, 3

    def transcribe(self, audio):
        self.heard.append(audio)
        if self.error is not None:
            raise self.error
        return self.transcripts.pop(0) if self.transcripts else ""

    def feed(self, samples, status=""):
        self.callback(samples, status)


def _listener(backend, **kw):
    kw.setdefault("min_samples", 2)
    kw.setdefault("poll_seconds", 0)
    return SpeechListener(backend.open_stream, FakeRecorder, backend.transcribe, **kw)


def test_transcript_event():
    backend = FakeBackend(["Дима единицы 5"])
    listener = _listener(backend)
    listener.start()
    assert listener.listening
    assert listener.poll() is None

    backend.feed([1, 2, 3])
    assert listener.poll() == SpeechEvent("transcript", "Дима единицы 5")
    assert backend.heard == [[1, 2, 3]]
    assert listener.poll() is None


def test_short_utterance_ignored():
    backend = FakeBackend(["кашель"])
    listener = _listener(backend)
    listener.start()
    backend.feed([1])
    assert listener.poll() is None
    assert backend.heard == []


def test_empty_transcript_ignored():
    backend = FakeBackend([""])
    listener = _listener(backend)
    listener.start()
    backend.feed([1, 2, 3])
    assert listener.poll() is None


def test_transcription_failure_becomes_error_and_stops():
    backend = FakeBackend(error=RuntimeError("model crashed"))
    listener = _listener(backend)
    listener.start()
    backend.feed([1, 2, 3])
    event = listener.poll()
    assert event.kind == "error"
    assert isinstance(event.error, SpeechRecognitionError)
    assert "model crashed" in event.text
    assert not listener.listening
    assert backend.stream.stopped and backend.stream.closed


def test_dead_stream_becomes_error():
    backend = FakeBackend()
    listener = _listener(backend)
    listener.start()
    backend.stream.active = False
    event = listener.poll()
    assert event.kind == "error"
    assert not listener.listening


def test_events_end_after_stop():
    backend = FakeBackend(["Дима каре 20"])
    listener = _listener(backend)
    listener.start()
    backend.feed([1, 2, 3])

    events = []
    for event in listener.events():
        events.append(event)
        if event.kind == "transcript":
            listener.stop()
    assert [e.kind for e in events] == ["transcript", "end"]


def test_events_when_never_started():
    listener = _listener(FakeBackend())
    assert [e.kind for e in listener.events()] == ["end"]


def test_context_manager_releases_stream():
    backend = FakeBackend()
    with _listener(backend) as listener:
        assert listener.listening
    assert not listener.listening
    assert backend.stream.closed


def test_stop_is_idempotent():
    backend = FakeBackend()
    listener = _listener(backend)
    listener.start()
    listener.start()
    listener.stop()
    listener.stop()
    assert backend.stream.closed


def test_open_failure_is_unavailable():
    def broken(callback):
        raise OSError("no such device")

    listener = SpeechListener(broken, FakeRecorder, lambda audio: "")
    with pytest.raises(SpeechSourceUnavailable) as exc:
        listener.start()
    assert exc.value.code == "SPEECH_SOURCE_UNAVAILABLE"
    assert not listener.listening


def test_mic_status_is_logged():
    lines = []
    backend = FakeBackend()
    listener = _listener(backend, log=lines.append)
    listener.start()
    backend.feed([], status="input overflow")
    assert "[mic] input overflow" in lines
