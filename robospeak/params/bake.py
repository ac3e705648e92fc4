"""
Parameter baking: resolve a symbol into a concrete playback instance.
"""
import logging
from typing import Dict, Mapping, Tuple

from robospeak.core.context import GenerationContext
from robospeak.core.errors import UnknownSymbol
from robospeak.core.types import BakedInstance, PlaybackInstance, Symbol, WaitInstance
from robospeak.params import canonical_defaults as defaults
from robospeak.params.ranges import SYMBOL_RANGES, ParameterRange, RangeDefinition, get_symbol_range

logger = logging.getLogger(__name__)

DEFAULT_WAIT_BAND: Tuple[float, float] = (defaults.WAIT_MIN_MS, defaults.WAIT_MAX_MS)


def bake_symbol(
    symbol: Symbol,
    ctx: GenerationContext,
    ranges: Mapping[Symbol, RangeDefinition] = SYMBOL_RANGES,
    wait_band: Tuple[float, float] = DEFAULT_WAIT_BAND,
) -> PlaybackInstance:
    """
    Bake one symbol.

    Silence (no range definition) becomes a WaitInstance with a duration drawn from
    wait_band. Otherwise a waveform class is drawn from the candidate set (if any), then
    every declared parameter is sampled from its range or copied if fixed.

    Raises:
        UnknownSymbol: symbol has no range definition and is not silence.
    """
    definition = get_symbol_range(symbol, ranges)
    if definition is None:
        if symbol is Symbol.SILENCE:
            return WaitInstance(duration_ms=ctx.uniform(*wait_band))
        raise UnknownSymbol(symbol)

    params: Dict[str, float] = {}

    if definition.wave_types:
        params["wave_type"] = int(ctx.choice(definition.wave_types))

    for name, value in definition.params.items():
        # wave_type already resolved by the class draw
        if name == "wave_type" and "wave_type" in params:
            continue
        if isinstance(value, ParameterRange):
            params[name] = ctx.uniform(value.min, value.max)
        else:
            params[name] = value

    return BakedInstance(symbol=symbol, params=params, id=ctx.next_instance_id(symbol.value))
