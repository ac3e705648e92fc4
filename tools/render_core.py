"""
Core rendering utilities with debug outputs, fingerprinting, and bake tracing.
Used by canonical render.py tool.
"""
import sys
import os
import json
import hashlib
import random
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import torch

from robospeak.core.config import Settings
from robospeak.core.context import GenerationContext
from robospeak.core.io import AudioIO
from robospeak.core.types import Assembly, Word, sequence_string
from robospeak.export.exporter import Exporter
from robospeak.pipeline import assembler_for, bake_sequence, generate
from robospeak.qc.qc import analyze


def _get_git_hash() -> str:
    """Get short git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            cwd=os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except OSError:
        pass
    return "unknown"


def _compute_audio_fingerprint(assembly: Assembly) -> Dict:
    """Compute fingerprint: SHA256 of the PCM samples, peak and RMS as fractions of full scale."""
    fmt = assembly.fmt
    sha256 = hashlib.sha256(assembly.samples.numpy().tobytes()).hexdigest()

    if assembly.num_frames == 0:
        return {"sha256": sha256, "peak": 0.0, "rms": 0.0, "frames": 0}

    x = (assembly.samples.double() - fmt.neutral) / fmt.scale
    peak = float(torch.max(torch.abs(x)))
    rms = float(torch.sqrt(torch.mean(x ** 2) + 1e-12))

    return {
        "sha256": sha256,
        "peak": peak,
        "rms": rms,
        "frames": assembly.num_frames,
    }


def render_utterance(
    output_dir: Path,
    seed: Optional[int] = None,
    words: Optional[Sequence[Word]] = None,
    settings: Optional[Settings] = None,
    debug: bool = False,
    qc: bool = False,
    prefix: str = "",
    script_name: str = "unknown",
) -> Tuple[Assembly, Dict]:
    """
    Render one utterance with full bake tracing and fingerprinting.

    Args:
        output_dir: Directory to save WAV and debug JSON
        seed: Random seed (None = random)
        words: Fixed word sequence; generated from the grammar when None
        settings: Runtime settings (None = environment)
        debug: Enable debug outputs (saves <name>.baked.json)
        qc: Run QC analysis
        prefix: Prepended to the robot-<sequence>.wav filename
        script_name: Name of calling script (for debug JSON)

    Returns:
        Tuple of (assembly, debug_info_dict)
    """
    if seed is None:
        seed = random.randint(0, 2**31 - 1)
    settings = settings or Settings.from_env()

    ctx = GenerationContext(seed)

    # Step 1: Words (grammar unless given)
    if words is None:
        words = generate(ctx, settings)
    words = list(words)

    # Step 2: Bake
    baked = bake_sequence(words, ctx, settings)

    # Step 3: Assemble
    assembly = assembler_for(settings).assemble(baked)

    # Step 4: Fingerprint
    fingerprint = _compute_audio_fingerprint(assembly)

    # Step 5: QC analysis (optional)
    qc_result = analyze(assembly) if qc else None

    # Step 6: Save WAV
    output_dir.mkdir(parents=True, exist_ok=True)
    filename = prefix + Exporter.filename_for(words)
    wav_path = output_dir / filename
    AudioIO.save_wav(assembly.samples, assembly.fmt, str(wav_path))

    # Step 7: Save debug JSON if enabled
    debug_info = {
        "script_name": script_name,
        "timestamp": datetime.now().isoformat(),
        "git_hash": _get_git_hash(),
        "seed": seed,
        "grammar": settings.grammar,
        "sample_rate": assembly.fmt.sample_rate,
        "bit_depth": assembly.fmt.bit_depth,
        "sequence": sequence_string(words),
        "baked": [w.to_dict() for w in baked],
        "segment_lengths": assembly.segment_lengths,
        "fingerprint": fingerprint,
        "qc_result": qc_result,
        "wav_path": str(wav_path),
    }

    if debug:
        json_path = output_dir / f"{Path(filename).stem}.baked.json"
        with open(json_path, "w") as f:
            json.dump(debug_info, f, indent=2, default=str)
        debug_info["json_path"] = str(json_path)

    return assembly, debug_info


def get_unique_output_dir(base_name: str) -> Path:
    """
    Generate unique output directory: renders/{base_name}/YYYYMMDD_HHMMSS_{gitshort}/
    """
    now = datetime.now()
    date_str = now.strftime("%Y%m%d")
    time_str = now.strftime("%H%M%S")
    git_hash = _get_git_hash()
    short_hash = git_hash[:8] if git_hash != "unknown" else "unknown"

    unique_dir = Path("renders") / base_name / f"{date_str}_{time_str}_{short_hash}"
    return unique_dir


def summarize(debug_infos: List[Dict]) -> List[str]:
    """Sequences whose QC status is "fail"."""
    return [
        info["sequence"]
        for info in debug_infos
        if (info.get("qc_result") or {}).get("status") == "fail"
    ]
