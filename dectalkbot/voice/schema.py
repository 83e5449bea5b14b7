"""Versioned DECtalk voice parameter schemas.

Responsibilities:
- Declare every synthesized parameter with its DECtalk `[:dv]` code, numeric width,
  and the two reference preset values its range is derived from.
- Fix the derivation order per schema version; order is part of the
  reproducibility contract for persisted rolls.

Key types:
- `ParameterSpec`: one named, width-bounded voice parameter.
- `VoiceSchema`: an ordered, versioned parameter list.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

DRAW_STREAM = "stream"
DRAW_ROLL_PARITY = "roll_parity"

DEFAULT_SCHEMA_VERSION = "v2"

# DECtalk built-in "Paul" voice.
PRESET_A: Mapping[str, int] = {
    "average_pitch": 112,
    "assertiveness": 100,
    "fourth_formant_bandwidth": 280,
    "fifth_formant_bandwidth": 330,
    "baseline_fall": 18,
    "breathiness": 0,
    "fourth_formant_resonance": 3300,
    "fifth_formant_resonance": 3650,
    "hat_rise": 18,
    "head_size": 100,
    "laryngealization": 0,
    "lax_breathiness": 0,
    "num_fixed_samples_open_glottis": 10,
    "pitch_range": 100,
    "quickness": 40,
    "richness": 70,
    "smoothness": 30,
    "stress_rise": 25,
    "sex": 1,
}

# DECtalk built-in "Wendy" voice.
PRESET_B: Mapping[str, int] = {
    "average_pitch": 195,
    "assertiveness": 55,
    "fourth_formant_bandwidth": 300,
    "fifth_formant_bandwidth": 2048,
    "baseline_fall": 10,
    "breathiness": 45,
    "fourth_formant_resonance": 4600,
    "fifth_formant_resonance": 2500,
    "hat_rise": 18,
    "head_size": 100,
    "laryngealization": 0,
    "lax_breathiness": 80,
    "num_fixed_samples_open_glottis": 15,
    "pitch_range": 100,
    "quickness": 20,
    "richness": 70,
    "smoothness": 20,
    "stress_rise": 22,
    "sex": 1,
}

# name -> (DECtalk code, width in bits)
_PARAMETER_CODES: Mapping[str, tuple[str, int]] = {
    "average_pitch": ("ap", 16),
    "assertiveness": ("as", 8),
    "fourth_formant_bandwidth": ("b4", 16),
    "fifth_formant_bandwidth": ("b5", 16),
    "baseline_fall": ("bf", 16),
    "breathiness": ("br", 8),
    "fourth_formant_resonance": ("f4", 16),
    "fifth_formant_resonance": ("f5", 16),
    "hat_rise": ("hr", 16),
    "head_size": ("hs", 8),
    "laryngealization": ("la", 8),
    "lax_breathiness": ("lx", 8),
    "num_fixed_samples_open_glottis": ("nf", 16),
    "pitch_range": ("pr", 8),
    "quickness": ("qu", 8),
    "richness": ("ri", 8),
    "smoothness": ("sm", 8),
    "stress_rise": ("sr", 16),
    "sex": ("sx", 8),
}


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One synthesized voice parameter.

    Attributes:
        name: Stable parameter name.
        code: Two-letter DECtalk `[:dv]` code.
        width: Unsigned integer width in bits (8 or 16).
        draw: `stream` to consume one permutation step, `roll_parity` for `roll % 2`.
    """

    name: str
    code: str
    width: int
    draw: str = DRAW_STREAM

    @property
    def ceiling(self) -> int:
        """Return the largest value representable at this parameter width."""

        return (1 << self.width) - 1


@dataclass(frozen=True, slots=True)
class VoiceSchema:
    """Ordered, versioned voice parameter list."""

    version: str
    parameters: tuple[ParameterSpec, ...]

    def names(self) -> tuple[str, ...]:
        """Return parameter names in derivation order."""

        return tuple(parameter.name for parameter in self.parameters)

    def parameter(self, name: str) -> ParameterSpec:
        """Return one parameter spec by name."""

        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        raise KeyError(name)


def _build_schema(
    version: str,
    order: tuple[str, ...],
    draws: Mapping[str, str] | None = None,
) -> VoiceSchema:
    """Build a schema from an ordered name list and the shared code table."""

    overrides = draws or {}
    parameters = []
    for name in order:
        code, width = _PARAMETER_CODES[name]
        parameters.append(
            ParameterSpec(
                name=name,
                code=code,
                width=width,
                draw=overrides.get(name, DRAW_STREAM),
            )
        )
    return VoiceSchema(version=version, parameters=tuple(parameters))


SCHEMA_V1 = _build_schema(
    "v1",
    (
        "average_pitch",
        "fourth_formant_bandwidth",
        "fourth_formant_resonance",
        "fifth_formant_bandwidth",
        "fifth_formant_resonance",
        "breathiness",
        "smoothness",
        "richness",
        "laryngealization",
        "quickness",
        "num_fixed_samples_open_glottis",
        "stress_rise",
        "hat_rise",
        "baseline_fall",
        "assertiveness",
        "pitch_range",
        "sex",
    ),
    draws={"sex": DRAW_ROLL_PARITY},
)

SCHEMA_V2 = _build_schema(
    "v2",
    (
        "average_pitch",
        "assertiveness",
        "fourth_formant_bandwidth",
        "fifth_formant_bandwidth",
        "baseline_fall",
        "breathiness",
        "fourth_formant_resonance",
        "fifth_formant_resonance",
        "hat_rise",
        "head_size",
        "laryngealization",
        "lax_breathiness",
        "num_fixed_samples_open_glottis",
        "pitch_range",
        "quickness",
        "richness",
        "smoothness",
        "stress_rise",
        "sex",
    ),
)

SCHEMAS: Mapping[str, VoiceSchema] = MappingProxyType(
    {
        SCHEMA_V1.version: SCHEMA_V1,
        SCHEMA_V2.version: SCHEMA_V2,
    }
)


def get_schema(version: str) -> VoiceSchema:
    """Return a registered schema by version label."""

    try:
        return SCHEMAS[version]
    except KeyError as exc:
        supported = ", ".join(sorted(SCHEMAS))
        raise ValueError(
            f"Unsupported voice schema `{version}`; supported: {supported}."
        ) from exc
