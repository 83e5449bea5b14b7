"""Deterministic procedural voice synthesis.

Responsibilities:
- Derive a full `VoiceProfile` from an `(identity, roll)` pair.
- Keep the derivation bit-reproducible: equal inputs always yield equal profiles,
  since only the identity and roll are persisted, never the profile itself.

Derivation walks the schema in its declared order. Every `stream` parameter takes
exactly one word from a fresh `KeccakStream`; `roll_parity` parameters use
`roll % 2` and do not advance the stream.
"""

from __future__ import annotations

from ..parsing import parse_u64
from .profile import VoiceProfile
from .ranges import range_table
from .schema import (
    DEFAULT_SCHEMA_VERSION,
    DRAW_ROLL_PARITY,
    PRESET_A,
    PRESET_B,
    get_schema,
)
from .stream import KeccakStream


class VoiceSynthesizer:
    """Build voice profiles for one schema version."""

    def __init__(self, schema_version: str = DEFAULT_SCHEMA_VERSION) -> None:
        """Initialize the synthesizer and resolve its schema and range table."""

        self.schema = get_schema(schema_version)
        self.ranges = range_table(schema_version)

    @property
    def schema_version(self) -> str:
        return self.schema.version

    def synthesize(self, identity: int, roll: int = 0) -> VoiceProfile:
        """Derive the voice profile for `identity` under `roll`."""

        identity = parse_u64(identity, "identity")
        roll = parse_u64(roll, "roll")

        stream = KeccakStream(identity, roll)
        values: list[tuple[str, int]] = []
        for parameter in self.schema.parameters:
            bounds = self.ranges[parameter.name]
            if parameter.draw == DRAW_ROLL_PARITY:
                value = roll % 2
            else:
                value = stream.draw(bounds.minimum, bounds.maximum)
            values.append((parameter.name, value))
        return VoiceProfile(schema_version=self.schema.version, values=tuple(values))


def synthesize_voice(
    identity: int, roll: int = 0, schema_version: str = DEFAULT_SCHEMA_VERSION
) -> VoiceProfile:
    """Derive one voice profile without holding a synthesizer instance."""

    return VoiceSynthesizer(schema_version).synthesize(identity, roll)


def preset_profile(which: str = "a", schema_version: str = DEFAULT_SCHEMA_VERSION) -> VoiceProfile:
    """Return reference preset `a` (Paul) or `b` (Wendy) as a voice profile."""

    normalized = which.strip().lower()
    if normalized == "a":
        return VoiceProfile.from_mapping(schema_version, PRESET_A)
    if normalized == "b":
        return VoiceProfile.from_mapping(schema_version, PRESET_B)
    raise ValueError(f"Unknown voice preset `{which}`; expected `a` or `b`.")
