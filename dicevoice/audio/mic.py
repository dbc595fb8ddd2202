"""Microphone input for the voice score sheet.

Opens a continuous 16 kHz mono int16 stream from the best available input
device and hands each block to a callback.

Usage (standalone check, lists devices and records 3 seconds):
    python -m dicevoice.audio.mic
"""

import numpy as np
import sounddevice as sd

from dicevoice.errors import SpeechSourceUnavailable

SAMPLE_RATE = 16000
CHANNELS = 1
DTYPE = "int16"
BLOCK_SIZE = 1600  # 100ms chunks at 16 kHz

# Preferred input devices, in priority order (substring match on device name)
PREFERRED_DEVICES = [
    "USB",
    "Headset",
    "External Microphone",
]


def input_devices():
    """Return [(index, name)] for every device with input channels."""
    return [(i, d["name"]) for i, d in enumerate(sd.query_devices())
            if d["max_input_channels"] > 0]


def find_preferred_device():
    """Index of the first device matching PREFERRED_DEVICES, or None for the default."""
    devices = input_devices()
    for preferred in PREFERRED_DEVICES:
        for i, name in devices:
            if preferred.lower() in name.lower():
                return i
    return None


def require_input_device():
    """Raise SpeechSourceUnavailable unless some input device exists."""
    try:
        devices = input_devices()
    except sd.PortAudioError as e:
        raise SpeechSourceUnavailable(f"Audio system unavailable: {e}") from e
    if not devices:
        raise SpeechSourceUnavailable("No microphone found.")


def open_mic_stream(callback, device=None, block_size=BLOCK_SIZE):
    """Open and start a mic input stream.

    Args:
        callback: Called with (audio_data, status_text) for each block.
                  audio_data is a numpy int16 array of shape (block_size,);
                  status_text is "" unless PortAudio reported a problem.
        device: Input device index, or None to pick one.
        block_size: Samples per block (default 1600 = 100ms at 16kHz).

    Returns:
        (stream, device): the started sounddevice.InputStream and the device
        index used (None means the system default).
    """
    def _sd_callback(indata, frames, time_info, status):
        callback(indata[:, 0].copy(), str(status) if status else "")

    if device is None:
        device = find_preferred_device()

    stream = sd.InputStream(
        samplerate=SAMPLE_RATE,
        channels=CHANNELS,
        dtype=DTYPE,
        blocksize=block_size,
        device=device,
        callback=_sd_callback,
    )
    stream.start()
    return stream, device


if __name__ == "__main__":
    import time

    for i, name in input_devices():
        print(f"  [{i}] {name}")
    print(f"\nRecording 3 seconds at {SAMPLE_RATE} Hz...")

    chunks = []
    stream, dev = open_mic_stream(lambda data, status: chunks.append(data))
    try:
        time.sleep(3)
    finally:
        stream.stop()
        stream.close()

    audio = np.concatenate(chunks)
    print(f"Device {dev}: {len(audio) / SAMPLE_RATE:.2f}s, "
          f"peak amplitude {np.max(np.abs(audio))}")
