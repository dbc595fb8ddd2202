"""Speech source: mic -> VAD utterance recorder -> Whisper -> transcript events.

SpeechListener owns the microphone stream. start() acquires it, stop() releases
it, and the listener is a context manager so the stream is always closed. The
mic callback only feeds audio to the recorder; transcription happens in
events(), on the consumer's thread, so transcripts arrive strictly one at a time.

Usage:
    with SpeechListener() as listener:
        for event in listener.events():
            if event.kind == "transcript":
                sheet.apply_command(event.text)
"""

import threading
import time
from dataclasses import dataclass

from dicevoice.errors import SpeechRecognitionError, SpeechSourceUnavailable

# Utterances shorter than this are clicks and coughs (100ms at 16 kHz)
MIN_UTTERANCE_SAMPLES = 1600

POLL_SECONDS = 0.05


@dataclass
class SpeechEvent:
    kind: str            # "transcript", "error" or "end"
    text: str = ""
    error: Exception = None


def _default_backend():
    """Load the real audio stack: (open_stream, make_recorder, transcriber)."""
    try:
        from dicevoice.audio.mic import open_mic_stream, require_input_device
        from dicevoice.stt.whisper import load_model, transcribe
        from dicevoice.vad.silero import load_vad_model, UtteranceRecorder
    except (ImportError, OSError) as e:
        raise SpeechSourceUnavailable(f"Speech recognition is not installed: {e}") from e

    require_input_device()
    try:
        vad_session = load_vad_model()
        whisper = load_model()
    except (OSError, RuntimeError) as e:
        raise SpeechSourceUnavailable(f"Could not load speech models: {e}") from e

    def transcriber(audio):
        return transcribe(audio, whisper)

    return open_mic_stream, lambda: UtteranceRecorder(vad_session), transcriber


class SpeechListener:
    """Scoped speech source producing final-transcript events.

    The three collaborators can be injected (tests use fakes):
        open_stream(callback) -> (stream, device); callback(audio, status)
        make_recorder() -> object with process(audio), done, get_result(), reset()
        transcriber(audio) -> str
    If none are given, the mic/Silero/Whisper stack is loaded on start().
    """

    def __init__(self, open_stream=None, make_recorder=None, transcriber=None,
                 min_samples=MIN_UTTERANCE_SAMPLES, poll_seconds=POLL_SECONDS, log=None):
        self._backend = None
        if open_stream is not None:
            self._backend = (open_stream, make_recorder, transcriber)
        self.min_samples = min_samples
        self.poll_seconds = poll_seconds
        self._log = log or (lambda msg: None)
        self._lock = threading.Lock()
        self._stream = None
        self._recorder = None
        self._transcriber = None

    @property
    def listening(self):
        return self._stream is not None

    def start(self):
        """Open the mic and begin segmenting utterances.

        Raises:
            SpeechSourceUnavailable: no audio backend, device or model.
        """
        if self._stream is not None:
            return
        if self._backend is None:
            self._backend = _default_backend()
        open_stream, make_recorder, self._transcriber = self._backend
        self._recorder = make_recorder()
        try:
            self._stream, device = open_stream(self._on_audio)
        except Exception as e:
            raise SpeechSourceUnavailable(f"Could not open the microphone: {e}") from e
        self._log(f"  mic open (device={device})")

    def stop(self):
        """Stop and close the mic stream. Safe to call more than once."""
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()
            self._log("  mic closed")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def _on_audio(self, data, status):
        if status:
            self._log(f"[mic] {status}")
        with self._lock:
            if self._recorder is not None:
                self._recorder.process(data)

    def poll(self):
        """Return the next event if an utterance is ready, else None."""
        if self._stream is None:
            return None
        if not getattr(self._stream, "active", True):
            return self._fail(SpeechRecognitionError("The microphone stream stopped."))

        with self._lock:
            if not self._recorder.done:
                return None
            audio = self._recorder.get_result()
            self._recorder.reset()

        if audio is None or len(audio) < self.min_samples:
            return None
        try:
            text = self._transcriber(audio)
        except Exception as e:
            return self._fail(SpeechRecognitionError(f"Transcription failed: {e}"))
        if not text:
            return None
        return SpeechEvent("transcript", text)

    def _fail(self, error):
        self.stop()
        return SpeechEvent("error", str(error), error)

    def events(self):
        """Yield events until stop() is called; the last event is always "end"."""
        while self._stream is not None:
            event = self.poll()
            if event is None:
                time.sleep(self.poll_seconds)
            else:
                yield event
        yield SpeechEvent("end")
