"""
Error taxonomy for the generation pipeline.
Every error is fatal to the call that raised it; nothing is retried and no partial
sequence or buffer is returned.
"""


class RobospeakError(Exception):
    """Base class for all pipeline errors."""


class InvalidWeights(RobospeakError, ValueError):
    """Selector got an empty, mismatched, negative, non-finite or all-zero weight set."""


class UnknownSymbol(RobospeakError, KeyError):
    """Symbol has no range definition and is not mapped to silence."""

    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"Unknown symbol: {symbol!r}")

    def __str__(self) -> str:
        return self.args[0]


class SynthesisFailure(RobospeakError, RuntimeError):
    """Synthesis capability could not produce a valid sample buffer."""


class GrammarError(RobospeakError, RuntimeError):
    """An expression produced no words."""


class MalformedRequest(RobospeakError, ValueError):
    """Serialized words or instances are missing fields or carry invalid values."""
