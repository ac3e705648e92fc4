import io
import json
import re
import zipfile
from datetime import datetime
from typing import Sequence

from robospeak.core.types import sequence_string


class Exporter:
    @staticmethod
    def filename_for(words) -> str:
        """robot-<sequence>.wav, e.g. robot-z1-z1-_2.wav; robot-empty.wav for an empty sequence."""
        suffix = re.sub(r"\s+", "-", sequence_string(words)) or "empty"
        return f"robot-{suffix}.wav"

    @staticmethod
    def create_bundle_zip(utterances: Sequence, name: str = "robospeak") -> bytes:
        """
        utterances: objects with .words, .baked, .wav and .seed (pipeline.Utterance).
        Each WAV is stored as NN_robot-<sequence>.wav next to a bundle_info.json.
        """
        buffer = io.BytesIO()

        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
            entries = []
            for i, utterance in enumerate(utterances):
                filename = f"{i:02d}_{Exporter.filename_for(utterance.words)}"
                zip_file.writestr(filename, utterance.wav)
                entries.append({
                    "file": filename,
                    "seed": utterance.seed,
                    "sequence": sequence_string(utterance.words),
                    "baked": [w.to_dict() for w in utterance.baked],
                })

            meta = {
                "bundle_name": name,
                "created_at": datetime.now().isoformat(),
                "utterances": entries,
            }
            zip_file.writestr("bundle_info.json", json.dumps(meta, indent=2))

        return buffer.getvalue()
