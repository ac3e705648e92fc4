"""
robospeak: procedural robot-speech utterances.
Grammar -> parameter baking -> waveform assembly.
"""
from robospeak.core.config import Settings
from robospeak.core.context import GenerationContext
from robospeak.core.errors import GrammarError, InvalidWeights, RobospeakError, SynthesisFailure, UnknownSymbol
from robospeak.core.types import AudioFormat, BakedInstance, BakedWord, Symbol, WaitInstance, Word
from robospeak.pipeline import Utterance, bake_sequence, generate, render, speak

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "Settings",
    "GenerationContext",
    "RobospeakError",
    "InvalidWeights",
    "UnknownSymbol",
    "SynthesisFailure",
    "GrammarError",
    "AudioFormat",
    "Symbol",
    "Word",
    "WaitInstance",
    "BakedInstance",
    "BakedWord",
    "Utterance",
    "generate",
    "bake_sequence",
    "render",
    "speak",
]
