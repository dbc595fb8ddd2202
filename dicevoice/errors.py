"""Exceptions raised by the score sheet.

Unrecognized commands are not errors: the resolver simply returns None, because
speech recognition noise regularly produces text that is not a command.
"""


class ScoreSheetError(Exception):
    """Base class for score sheet failures. `code` is machine-readable."""

    def __init__(self, code, message, details=None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class DuplicatePlayer(ScoreSheetError):
    """A player with the same name (ignoring case) is already registered."""

    def __init__(self, name, existing):
        super().__init__(
            "DUPLICATE_PLAYER",
            f"A player named {existing!r} already exists.",
            {"name": name, "existing": existing})


class SpeechSourceUnavailable(ScoreSheetError):
    """No usable audio input or speech model."""

    def __init__(self, message, details=None):
        super().__init__("SPEECH_SOURCE_UNAVAILABLE", message, details)


class SpeechRecognitionError(ScoreSheetError):
    """The speech source failed while listening."""

    def __init__(self, message, details=None):
        super().__init__("SPEECH_RECOGNITION_ERROR", message, details)
