"""Speech-to-text using faster-whisper.

Transcribes one int16 utterance (16 kHz mono) to Russian text. The score
sheet vocabulary is passed as an initial prompt so the model prefers
"каре" and "фулл-хаус" over similar-sounding words.

Usage (standalone test, transcribes one utterance from the mic):
    python -m dicevoice.stt.whisper
"""

import os

import numpy as np

# Workaround for OpenMP duplicate library conflict (onnxruntime + ctranslate2 on macOS)
os.environ.setdefault("KMP_DUPLICATE_LIB_OK", "TRUE")

from faster_whisper import WhisperModel

from dicevoice.commands.vocabulary import COMBINATIONS

DEFAULT_MODEL_SIZE = "small"
DEFAULT_COMPUTE_TYPE = "int8"
LANGUAGE = "ru"

INITIAL_PROMPT = "Очки: " + ", ".join(c.value for c in COMBINATIONS if not c.value.isdigit()) + "."

_model = None


def load_model(model_size=DEFAULT_MODEL_SIZE, compute_type=DEFAULT_COMPUTE_TYPE):
    """Load the Whisper model. Caches on first call."""
    global _model
    if _model is None:
        _model = WhisperModel(model_size, device="cpu", compute_type=compute_type)
    return _model


def transcribe(audio, model=None):
    """Transcribe int16 audio to text.

    Args:
        audio: numpy int16 array (16 kHz mono).
        model: WhisperModel instance, or None to use the cached default.

    Returns:
        str: The transcript (stripped), or "" if nothing was recognized.
    """
    if model is None:
        model = load_model()

    # faster-whisper expects float32 normalized to [-1, 1]
    audio_f32 = audio.astype(np.float32) / 32768.0

    segments, _ = model.transcribe(
        audio_f32,
        language=LANGUAGE,
        initial_prompt=INITIAL_PROMPT,
        vad_filter=False,  # the recorder already trimmed to one utterance
        beam_size=5,
    )
    return " ".join(s.text for s in segments).strip()


if __name__ == "__main__":
    import time
    from dicevoice.audio.mic import open_mic_stream
    from dicevoice.vad.silero import load_vad_model, UtteranceRecorder

    print("Loading models...")
    recorder = UtteranceRecorder(load_vad_model())
    whisper_model = load_model()
    print("Say a command, e.g. \"Дима единицы пять\".\n")

    stream, _ = open_mic_stream(lambda data, status: recorder.process(data))
    try:
        while not recorder.done:
            time.sleep(0.05)
    finally:
        stream.stop()
        stream.close()

    t0 = time.time()
    text = transcribe(recorder.get_result(), whisper_model)
    print(f"  [{time.time() - t0:.1f}s] \"{text}\"")
