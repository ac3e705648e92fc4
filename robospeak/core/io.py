import io
from typing import Tuple, Union

import numpy as np
import soundfile as sf
import torch

from robospeak.core.types import AudioFormat


class AudioIO:
    @staticmethod
    def _to_int16(samples: Union[torch.Tensor, np.ndarray], fmt: AudioFormat) -> np.ndarray:
        """
        Map integer samples in the format's domain onto int16 for libsndfile.
        Unsigned 8-bit values shift by 8 bits, which libsndfile maps back exactly on write.
        """
        if isinstance(samples, torch.Tensor):
            data = samples.detach().cpu().numpy()
        else:
            data = np.asarray(samples)
        data = np.clip(data.astype(np.int32), fmt.min_value, fmt.max_value)
        if fmt.bit_depth == 8:
            data = (data - fmt.neutral) << 8
        return data.astype(np.int16)

    @staticmethod
    def to_bytes(samples: Union[torch.Tensor, np.ndarray], fmt: AudioFormat) -> bytes:
        """Returns a RIFF/WAVE file as bytes (for API responses and downloads)."""
        buffer = io.BytesIO()
        data = AudioIO._to_int16(samples, fmt)
        sf.write(buffer, data, fmt.sample_rate, format="WAV", subtype=fmt.subtype)
        return buffer.getvalue()

    @staticmethod
    def save_wav(samples: Union[torch.Tensor, np.ndarray], fmt: AudioFormat, path: str):
        """Saves integer samples to a WAV file."""
        data = AudioIO._to_int16(samples, fmt)
        sf.write(path, data, fmt.sample_rate, format="WAV", subtype=fmt.subtype)

    @staticmethod
    def read_wav(data: Union[bytes, str]) -> Tuple[torch.Tensor, AudioFormat]:
        """Reads a WAV written by to_bytes/save_wav back into the format's integer domain."""
        source = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else data
        info = sf.info(source)
        if isinstance(source, io.BytesIO):
            source.seek(0)
        bit_depth = 8 if info.subtype == "PCM_U8" else 16
        fmt = AudioFormat(sample_rate=info.samplerate, bit_depth=bit_depth)
        raw, _ = sf.read(source, dtype="int16", always_2d=False)
        values = raw.astype(np.int32)
        if bit_depth == 8:
            values = (values >> 8) + fmt.neutral
        return torch.from_numpy(values), fmt
