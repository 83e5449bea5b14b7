"""Per-parameter range derivation from two reference presets.

Responsibilities:
- Derive inclusive `[minimum, maximum]` bounds for every schema parameter with
  saturating arithmetic at the parameter's unsigned width.
- Build each schema's range table once per process and expose it read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from types import MappingProxyType
from typing import Iterable, Mapping

from .schema import DRAW_ROLL_PARITY, PRESET_A, PRESET_B, ParameterSpec, get_schema


@dataclass(frozen=True, slots=True)
class RangeSpec:
    """Inclusive numeric bounds for one voice parameter.

    Attributes:
        name: Parameter name.
        width: Unsigned integer width in bits.
        minimum: Inclusive lower bound.
        maximum: Inclusive upper bound.
    """

    name: str
    width: int
    minimum: int
    maximum: int

    @property
    def span(self) -> int:
        """Return the number of distinct values inside the range."""

        return self.maximum - self.minimum + 1

    def contains(self, value: int) -> bool:
        """Return whether `value` lies inside the inclusive range."""

        return self.minimum <= value <= self.maximum


def derive_range(parameter: ParameterSpec, value_a: int, value_b: int) -> RangeSpec:
    """Derive one parameter range centered on preset A with width `|A - B|`.

    The result is clamped at `0` and at the parameter's width ceiling, so it can be
    asymmetric around preset A.
    """

    delta = abs(value_a - value_b)
    return RangeSpec(
        name=parameter.name,
        width=parameter.width,
        minimum=max(value_a - delta, 0),
        maximum=min(value_a + delta, parameter.ceiling),
    )


def derive_ranges(
    preset_a: Mapping[str, int],
    preset_b: Mapping[str, int],
    parameters: Iterable[ParameterSpec],
) -> Mapping[str, RangeSpec]:
    """Derive a read-only name-to-range mapping for the given parameters.

    Parameters drawn from roll parity are binary flags and always span `[0, 1]`.
    """

    table: dict[str, RangeSpec] = {}
    for parameter in parameters:
        if parameter.draw == DRAW_ROLL_PARITY:
            table[parameter.name] = RangeSpec(
                name=parameter.name, width=parameter.width, minimum=0, maximum=1
            )
            continue
        table[parameter.name] = derive_range(
            parameter, preset_a[parameter.name], preset_b[parameter.name]
        )
    return MappingProxyType(table)


@cache
def range_table(version: str) -> Mapping[str, RangeSpec]:
    """Return the process-wide range table for a schema version."""

    return derive_ranges(PRESET_A, PRESET_B, get_schema(version).parameters)
