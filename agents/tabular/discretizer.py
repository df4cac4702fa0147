#!/usr/bin/env python3
# agents/tabular/discretizer.py
#
# Maps a raw game observation onto a small, finite state key:
#   hp bucket | ammo bucket | dist bucket | inZone | hasKnife
# Every field falls back to a fixed bucket when missing or unusable, so
# discretize() never raises.
#
# Note: dist=0 is a real distance here (bucket 0). The old JS server used
# `obs.dist || 999`, so it keyed dist=0 as bucket 4; tables saved by it
# differ from ours for those states.

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

SEPARATOR = '|'
DIST_SENTINEL = 999     # "far away" when the client does not report distance
HP_BUCKET = 25          # 0..100 -> 0..4
DIST_BUCKET = 20
MAX_DIST_BUCKET = 4


@dataclass(frozen=True)
class Observation:
    health: Any = None
    ammo: Any = None
    distance: Any = None
    in_zone: Any = False
    has_item: Any = False

    @classmethod
    def from_wire(cls, raw: Optional[Mapping[str, Any]]) -> "Observation":
        """Build from the client's {hp, ammo, dist, inZone, hasKnife} record."""
        if not isinstance(raw, Mapping):
            raw = {}
        return cls(
            health=raw.get('hp'),
            ammo=raw.get('ammo'),
            distance=raw.get('dist'),
            in_zone=raw.get('inZone', False),
            has_item=raw.get('hasKnife', False),
        )


def _number(value) -> Optional[float]:
    # bools are ints in Python but never a meaningful hp/ammo/dist
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def discretize(obs: Observation) -> str:
    hp = _number(obs.health)
    hp = 0 if hp is None else _round_half_up(max(0.0, min(100.0, hp)))
    hp_bucket = hp // HP_BUCKET

    ammo = _number(obs.ammo)
    ammo_bucket = 1 if ammo is not None and ammo > 0 else 0

    dist = _number(obs.distance)
    dist = DIST_SENTINEL if dist is None else _round_half_up(max(0.0, dist))
    dist_bucket = min(MAX_DIST_BUCKET, dist // DIST_BUCKET)

    zone = 1 if obs.in_zone else 0
    knife = 1 if obs.has_item else 0
    return SEPARATOR.join(str(b) for b in (hp_bucket, ammo_bucket, dist_bucket, zone, knife))
