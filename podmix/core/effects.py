"""
Effect descriptors attached to clips.

Each effect kind is its own frozen record with typed parameters. The
mixer does not process them; they travel with the clip for the effect
processor. Defaults follow the editor's processing chain.
"""
from __future__ import annotations
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Union


class EffectKind(Enum):
    NORMALIZE = "normalize"
    EQ = "eq"
    COMPRESS = "compress"
    NOISE_GATE = "noise_gate"
    REVERB = "reverb"


@dataclass(frozen=True, slots=True)
class NormalizeEffect:
    target_level_db: float = -3.0
    peak_level_db: float = -1.0
    enabled: bool = True
    kind = EffectKind.NORMALIZE


@dataclass(frozen=True, slots=True)
class EqEffect:
    low_gain_db: float = 0.0
    mid_gain_db: float = 0.0
    high_gain_db: float = 0.0
    low_freq: float = 200.0
    mid_freq: float = 1000.0
    high_freq: float = 5000.0
    enabled: bool = True
    kind = EffectKind.EQ


@dataclass(frozen=True, slots=True)
class CompressorEffect:
    threshold_db: float = -24.0
    ratio: float = 4.0
    attack: float = 0.003  # seconds
    release: float = 0.25
    makeup_gain_db: float = 0.0
    enabled: bool = True
    kind = EffectKind.COMPRESS


@dataclass(frozen=True, slots=True)
class NoiseGateEffect:
    threshold_db: float = -40.0
    ratio: float = 10.0
    attack: float = 0.001
    release: float = 0.1
    enabled: bool = True
    kind = EffectKind.NOISE_GATE


@dataclass(frozen=True, slots=True)
class ReverbEffect:
    room_size: float = 0.5
    enabled: bool = True
    kind = EffectKind.REVERB


Effect = Union[NormalizeEffect, EqEffect, CompressorEffect, NoiseGateEffect, ReverbEffect]

EFFECT_TYPES: dict[EffectKind, type] = {
    EffectKind.NORMALIZE: NormalizeEffect,
    EffectKind.EQ: EqEffect,
    EffectKind.COMPRESS: CompressorEffect,
    EffectKind.NOISE_GATE: NoiseGateEffect,
    EffectKind.REVERB: ReverbEffect,
}


def effect_to_dict(effect: Effect) -> dict[str, Any]:
    """Serialize an effect as {'type': ..., 'parameters': {...}, 'enabled': ...}."""
    params = asdict(effect)
    enabled = params.pop('enabled')
    return {'type': effect.kind.value, 'parameters': params, 'enabled': enabled}


def effect_from_dict(payload: dict[str, Any]) -> Effect:
    """
    Rebuild an effect from its serialized form.

    Raises:
        ValueError: unknown effect type or parameter names
    """
    try:
        kind = EffectKind(payload['type'])
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unknown effect type: {payload.get('type')!r}") from e

    cls = EFFECT_TYPES[kind]
    params = dict(payload.get('parameters', {}))
    allowed = {f.name for f in fields(cls)} - {'enabled'}
    unknown = set(params) - allowed
    if unknown:
        raise ValueError(f"Unknown parameters for {kind.value}: {sorted(unknown)}")
    return cls(**{k: float(v) for k, v in params.items()}, enabled=bool(payload.get('enabled', True)))
