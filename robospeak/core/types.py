from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

import torch

from robospeak.core.errors import UnknownSymbol


class Symbol(str, Enum):
    """Abstract sound category. Values are the single-character codes used in sequence strings."""
    UP_SWEEP = "S"
    DOWN_SWEEP = "s"
    UP_ARPEGGIO = "A"
    DOWN_ARPEGGIO = "a"
    HIGH_BEEP = "B"
    LOW_BEEP = "b"
    WARBLE = "w"
    BUZZ = "z"
    SILENCE = "_"

    @classmethod
    def from_code(cls, code: str) -> "Symbol":
        try:
            return cls(code)
        except ValueError:
            raise UnknownSymbol(code) from None

    @property
    def is_silence(self) -> bool:
        return self is Symbol.SILENCE

    def __str__(self) -> str:
        return self.value


ALL_SYMBOLS: Tuple[Symbol, ...] = tuple(Symbol)
SOUND_SYMBOLS: Tuple[Symbol, ...] = tuple(s for s in Symbol if not s.is_silence)


@dataclass(frozen=True)
class Word:
    symbol: Symbol
    identity: str

    @property
    def key(self) -> Tuple[Symbol, str]:
        return (self.symbol, self.identity)

    def __str__(self) -> str:
        return f"{self.symbol.value}{self.identity}"

    def to_dict(self) -> Dict[str, Any]:
        return {"symbol": self.symbol.value, "identity": self.identity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Word":
        return cls(Symbol.from_code(data["symbol"]), str(data["identity"]))


@dataclass(frozen=True)
class WaitInstance:
    """Silence of a fixed duration."""
    duration_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "wait", "duration_ms": self.duration_ms}


@dataclass(frozen=True)
class BakedInstance:
    """Concrete synthesizer input for one (symbol, identity) pair."""
    symbol: Symbol
    params: Dict[str, float] = field(hash=False)
    id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "baked",
            "symbol": self.symbol.value,
            "params": dict(self.params),
            "id": self.id,
        }


PlaybackInstance = Union[WaitInstance, BakedInstance]


def instance_from_dict(data: Dict[str, Any]) -> PlaybackInstance:
    kind = data.get("kind")
    if kind == "wait":
        return WaitInstance(float(data["duration_ms"]))
    if kind == "baked":
        params = {k: float(v) for k, v in data.get("params", {}).items()}
        return BakedInstance(Symbol.from_code(data["symbol"]), params, str(data.get("id", "")))
    raise ValueError(f"Unknown playback instance kind: {kind!r}")


@dataclass(frozen=True)
class BakedWord:
    symbol: Symbol
    identity: str
    instance: PlaybackInstance

    @property
    def key(self) -> Tuple[Symbol, str]:
        return (self.symbol, self.identity)

    def __str__(self) -> str:
        return f"{self.symbol.value}{self.identity}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol.value,
            "identity": self.identity,
            "instance": self.instance.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BakedWord":
        return cls(
            Symbol.from_code(data["symbol"]),
            str(data["identity"]),
            instance_from_dict(data["instance"]),
        )


def sequence_string(words) -> str:
    """Space-separated `<code><identity>` rendering, e.g. "z1 z1 _2"."""
    return " ".join(str(w) for w in words)


@dataclass(frozen=True)
class AudioFormat:
    """PCM container format. 8-bit is unsigned (neutral 128), 16-bit is signed (neutral 0)."""
    sample_rate: int = 44100
    bit_depth: int = 8

    def __post_init__(self):
        if self.bit_depth not in (8, 16):
            raise ValueError(f"bit_depth must be 8 or 16, got {self.bit_depth}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")

    @property
    def neutral(self) -> int:
        return 128 if self.bit_depth == 8 else 0

    @property
    def min_value(self) -> int:
        return 0 if self.bit_depth == 8 else -32768

    @property
    def max_value(self) -> int:
        return 255 if self.bit_depth == 8 else 32767

    @property
    def scale(self) -> int:
        """Float full scale (1.0) maps to this many steps from neutral."""
        return 127 if self.bit_depth == 8 else 32767

    @property
    def subtype(self) -> str:
        return "PCM_U8" if self.bit_depth == 8 else "PCM_16"

    def samples_for_ms(self, duration_ms: float) -> int:
        return int(round(self.sample_rate * duration_ms / 1000.0))


@dataclass
class Assembly:
    """Concatenated, faded integer samples before container encoding."""
    samples: torch.Tensor  # int32, values in the format's representable range
    segment_lengths: List[int]
    fmt: AudioFormat

    @property
    def num_frames(self) -> int:
        return int(self.samples.shape[-1])

    @property
    def duration_s(self) -> float:
        return self.num_frames / self.fmt.sample_rate

    def boundaries(self) -> List[int]:
        """Sample offsets where each segment after the first begins."""
        out = []
        pos = 0
        for n in self.segment_lengths[:-1]:
            pos += n
            out.append(pos)
        return out
