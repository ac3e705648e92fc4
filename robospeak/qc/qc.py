"""
Quality Control analysis for assembled utterances.
Detects common failure modes: silence, clipping, DC offset and clicks at segment joins.
"""
from typing import Dict, Optional

import numpy as np
import torch

from robospeak.core.types import Assembly
from robospeak.qc.thresholds import QC_THRESHOLDS


def _db(x: float) -> float:
    """Convert linear to dB."""
    if x <= 0:
        return -np.inf
    return 20.0 * np.log10(abs(x))


def _normalized(assembly: Assembly) -> torch.Tensor:
    """Deviation from neutral as float in [-1, 1]."""
    fmt = assembly.fmt
    return (assembly.samples.double() - fmt.neutral) / fmt.scale


def _boundary_step(assembly: Assembly, x: torch.Tensor) -> float:
    """Largest absolute jump across a segment join."""
    steps = [
        float(torch.abs(x[b] - x[b - 1]))
        for b in assembly.boundaries()
        if 0 < b < x.shape[-1]
    ]
    return max(steps) if steps else 0.0


def analyze(assembly: Assembly, thresholds: Optional[Dict] = None) -> Dict:
    """
    Analyze an assembled utterance.

    Returns:
        Dict with metrics, status ("pass" / "warn" / "fail"), failures and warnings.
    """
    thresholds = thresholds or QC_THRESHOLDS
    fmt = assembly.fmt
    failures = []
    warnings = []

    if assembly.num_frames == 0:
        return {
            "status": "fail",
            "frames": 0,
            "duration_s": 0.0,
            "peak": 0.0,
            "peak_dbfs": -np.inf,
            "rms": 0.0,
            "dc_offset": 0.0,
            "clipped_ratio": 0.0,
            "boundary_step": 0.0,
            "failures": ["empty buffer"],
            "warnings": [],
        }

    x = _normalized(assembly)
    peak = float(torch.max(torch.abs(x)))
    rms = float(torch.sqrt(torch.mean(x ** 2) + 1e-12))
    dc = float(torch.mean(x))
    clipped = int(torch.sum((assembly.samples <= fmt.min_value) | (assembly.samples >= fmt.max_value)))
    clipped_ratio = clipped / assembly.num_frames
    boundary_step = _boundary_step(assembly, x)

    if peak < thresholds["peak_min"]:
        failures.append(f"peak {peak:.3f} < {thresholds['peak_min']}")
    if abs(dc) > thresholds["dc_offset_max"]:
        warnings.append(f"dc offset {dc:.4f} exceeds {thresholds['dc_offset_max']}")
    if clipped_ratio > thresholds["clipped_ratio_max"]:
        warnings.append(f"clipped ratio {clipped_ratio:.4f} exceeds {thresholds['clipped_ratio_max']}")
    if boundary_step > thresholds["boundary_step_max"]:
        failures.append(f"boundary step {boundary_step:.3f} exceeds {thresholds['boundary_step_max']}")
    if assembly.duration_s > thresholds["duration_s_max"]:
        warnings.append(f"duration {assembly.duration_s:.2f}s exceeds {thresholds['duration_s_max']}s")

    status = "fail" if failures else ("warn" if warnings else "pass")
    return {
        "status": status,
        "frames": assembly.num_frames,
        "duration_s": assembly.duration_s,
        "peak": peak,
        "peak_dbfs": _db(peak),
        "rms": rms,
        "dc_offset": dc,
        "clipped_ratio": clipped_ratio,
        "boundary_step": boundary_step,
        "failures": failures,
        "warnings": warnings,
    }
