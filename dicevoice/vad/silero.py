"""Utterance segmentation using Silero VAD (ONNX, no torch).

The mic runs continuously while listening, so the recorder idles until speech
starts, keeps a short pre-roll so the first syllable isn't clipped, and
finishes the utterance after a stretch of silence.

Usage (standalone test, prints the length of each utterance):
    python -m dicevoice.vad.silero
"""

import os
from collections import deque

import numpy as np
import onnxruntime as ort

# Silero requires exactly 512 samples per call at 16 kHz
SILERO_CHUNK_SIZE = 512

# Silence that ends an utterance. Score commands are short.
DEFAULT_SILENCE_MS = 700

# Audio kept from before speech onset
PRE_ROLL_MS = 300

# Maximum utterance length (seconds) to prevent runaway recordings
MAX_RECORD_SECONDS = 8

_session = None


def _find_model():
    """Locate silero_vad.onnx (bundled with openwakeword)."""
    import openwakeword
    path = os.path.join(os.path.dirname(openwakeword.__file__),
                        "resources", "models", "silero_vad.onnx")
    if not os.path.exists(path):
        raise FileNotFoundError(f"silero_vad.onnx not found at {path}")
    return path


def load_vad_model():
    """Load the Silero VAD ONNX session. Caches on first call."""
    global _session
    if _session is None:
        opts = ort.SessionOptions()
        opts.inter_op_num_threads = 1
        opts.intra_op_num_threads = 1
        _session = ort.InferenceSession(_find_model(), sess_options=opts)
    return _session


class SileroVAD:
    """Stateful speech-probability model over 512-sample float32 frames."""

    def __init__(self, session, sample_rate=16000):
        self.session = session
        self.sr = np.array(sample_rate, dtype=np.int64)
        self.reset()

    def reset(self):
        self.h = np.zeros((2, 1, 64), dtype=np.float32)
        self.c = np.zeros((2, 1, 64), dtype=np.float32)

    def __call__(self, frame):
        x = frame.reshape(1, -1).astype(np.float32)
        output, self.h, self.c = self.session.run(
            None, {"input": x, "sr": self.sr, "h": self.h, "c": self.c}
        )
        return float(output[0][0])


class UtteranceRecorder:
    """Collects one spoken utterance from a continuous stream.

    Feed mic chunks via process(). Once speech has started and then stopped
    (or the utterance hits max_seconds), `done` turns True and get_result()
    returns the audio, pre-roll included.
    """

    def __init__(self, session, threshold=0.5, silence_ms=DEFAULT_SILENCE_MS,
                 pre_roll_ms=PRE_ROLL_MS, max_seconds=MAX_RECORD_SECONDS,
                 sample_rate=16000):
        frame_ms = SILERO_CHUNK_SIZE / sample_rate * 1000  # 32ms
        self.threshold = threshold
        self.max_samples = int(max_seconds * sample_rate)
        self._silence_frames_needed = max(1, int(silence_ms / frame_ms))
        self._vad = SileroVAD(session, sample_rate)
        self._pre_roll = deque(maxlen=max(1, int(pre_roll_ms / frame_ms)))
        self.reset()

    def reset(self):
        """Forget everything and wait for the next utterance."""
        self._buffer = np.array([], dtype=np.int16)
        self._frames = []
        self._pre_roll.clear()
        self._silence_frames = 0
        self._speech_started = False
        self._done = False
        self._vad.reset()

    @property
    def done(self):
        return self._done

    @property
    def speech_started(self):
        return self._speech_started

    def process(self, audio_chunk):
        """Feed int16 mic audio (16 kHz mono)."""
        if self._done:
            return
        self._buffer = np.concatenate([self._buffer, audio_chunk])
        while len(self._buffer) >= SILERO_CHUNK_SIZE and not self._done:
            frame = self._buffer[:SILERO_CHUNK_SIZE]
            self._buffer = self._buffer[SILERO_CHUNK_SIZE:]
            self._step(frame)

    def _step(self, frame):
        prob = self._vad(frame.astype(np.float32) / 32768.0)
        if not self._speech_started:
            if prob < self.threshold:
                self._pre_roll.append(frame)
                return
            self._speech_started = True
            self._frames.extend(self._pre_roll)
            self._pre_roll.clear()

        self._frames.append(frame)
        if prob >= self.threshold:
            self._silence_frames = 0
        else:
            self._silence_frames += 1
            if self._silence_frames >= self._silence_frames_needed:
                self._done = True
        if len(self._frames) * SILERO_CHUNK_SIZE >= self.max_samples:
            self._done = True

    def get_result(self):
        """The utterance as one int16 array, or None if no speech was heard."""
        if not self._frames:
            return None
        return np.concatenate(self._frames)


if __name__ == "__main__":
    import time
    from dicevoice.audio.mic import open_mic_stream, SAMPLE_RATE

    print("Speak; each utterance is reported after you pause. Ctrl+C to quit.\n")
    recorder = UtteranceRecorder(load_vad_model())
    stream, _ = open_mic_stream(lambda data, status: recorder.process(data))
    try:
        while True:
            if recorder.done:
                audio = recorder.get_result()
                print(f"  utterance: {len(audio) / SAMPLE_RATE:.2f}s")
                recorder.reset()
            time.sleep(0.05)
    except KeyboardInterrupt:
        pass
    finally:
        stream.stop()
        stream.close()
