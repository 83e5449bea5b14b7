"""Voice profile records produced by synthesis.

Responsibilities:
- Represent one immutable, ordered set of DECtalk voice parameter values.
- Provide name lookup and stable serialization for logs and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping

from .schema import get_schema


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """Ordered, immutable DECtalk voice parameter values.

    Attributes:
        schema_version: Version label of the schema that produced the values.
        values: `(name, value)` pairs in schema derivation order.
    """

    schema_version: str
    values: tuple[tuple[str, int], ...]

    @classmethod
    def from_mapping(cls, schema_version: str, values: Mapping[str, int]) -> VoiceProfile:
        """Build a profile ordered by the schema from an unordered mapping."""

        schema = get_schema(schema_version)
        return cls(
            schema_version=schema_version,
            values=tuple((name, int(values[name])) for name in schema.names()),
        )

    def __getitem__(self, name: str) -> int:
        for key, value in self.values:
            if key == name:
                return value
        raise KeyError(name)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.values)

    def as_dict(self) -> dict[str, int]:
        """Return a plain name-to-value mapping."""

        return dict(self.values)

    def control_pairs(self) -> list[tuple[str, int]]:
        """Return `(DECtalk code, value)` pairs in schema order."""

        schema = get_schema(self.schema_version)
        return [(schema.parameter(name).code, value) for name, value in self.values]
