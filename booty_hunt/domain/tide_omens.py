"""Tide omen catalog.

Selection indexes into OMENS by position, so entries may be appended but never
reordered or removed: doing so would change which omen past weeks resolve to.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Union

from booty_hunt.domain.selector import TIDE_TAG, catalog_index

ModifierValue = Union[float, str]


class OmenDefinition(NamedTuple):
    omen_id: str
    omen_name: str
    modifiers: Mapping[str, ModifierValue]


def _omen(omen_id: str, omen_name: str, **modifiers: ModifierValue) -> OmenDefinition:
    return OmenDefinition(omen_id, omen_name, MappingProxyType(modifiers))


OMENS: tuple[OmenDefinition, ...] = (
    _omen("red_tide", "Red Tide", armed_percent_bonus=0.10, speed_multiplier=1.05),
    _omen("dead_calm", "Dead Calm", speed_multiplier=0.85, gold_multiplier=1.15),
    _omen("storm_season", "Storm Season", force_weather="stormy", damage_multiplier=1.10),
    _omen("ghost_moon", "Ghost Moon", force_weather="night", ghost_chance=0.20),
    _omen("golden_current", "Golden Current", gold_multiplier=1.25, health_multiplier=0.90),
    _omen("fog_bank", "Fog Bank", force_weather="foggy", vision_multiplier=0.70),
    _omen("fair_winds", "Fair Winds", speed_multiplier=1.10, health_multiplier=1.05),
)


def omen_for_week(week_key: str) -> OmenDefinition:
    return OMENS[catalog_index(week_key, TIDE_TAG, len(OMENS))]
