"""
Parameter schema, per-symbol ranges and baking.
"""
from robospeak.params.schema import PARAM_SCHEMA, PARAM_DEFAULTS, WaveType, with_defaults
from robospeak.params.ranges import SYMBOL_RANGES, ParameterRange, RangeDefinition, get_symbol_range, validate_ranges
from robospeak.params.bake import bake_symbol
from robospeak.params.sequence import bake_sequence

__all__ = [
    "PARAM_SCHEMA",
    "PARAM_DEFAULTS",
    "WaveType",
    "with_defaults",
    "SYMBOL_RANGES",
    "ParameterRange",
    "RangeDefinition",
    "get_symbol_range",
    "validate_ranges",
    "bake_symbol",
    "bake_sequence",
]
