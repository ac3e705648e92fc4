"""
Quality Control module for evaluating assembled utterances.
"""
from robospeak.qc.qc import analyze
from robospeak.qc.thresholds import QC_THRESHOLDS

__all__ = ["analyze", "QC_THRESHOLDS"]
