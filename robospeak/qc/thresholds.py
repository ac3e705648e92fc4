"""
Default QC thresholds for rendered utterances. Levels are fractions of full scale.
"""
QC_THRESHOLDS = {
    "peak_min": 0.05,  # Below this the utterance is effectively silent
    "dc_offset_max": 0.05,  # |mean deviation from neutral|
    "clipped_ratio_max": 0.02,  # Fraction of samples at the format's extremes
    "boundary_step_max": 0.5,  # Largest jump between the last/first samples of adjacent segments
    "duration_s_max": 30.0,
}
