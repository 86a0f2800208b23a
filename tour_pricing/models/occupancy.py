"""Occupancy multipliers derived from free-text component labels."""

from enum import IntEnum


class OccupancyMultiplier(IntEnum):
    """Number of people sharing a room.

    - 1: SINGLE (also the per-person default)
    - 2: DOUBLE
    - 3: TRIPLE
    - 4: QUAD
    """
    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3
    QUAD = 4


# Ordered keyword rules, first match wins
OCCUPANCY_RULES: tuple[tuple[str, OccupancyMultiplier], ...] = (
    ("single", OccupancyMultiplier.SINGLE),
    ("double", OccupancyMultiplier.DOUBLE),
    ("triple", OccupancyMultiplier.TRIPLE),
    ("quad", OccupancyMultiplier.QUAD),
)

DEFAULT_MULTIPLIER = OccupancyMultiplier.SINGLE


class OccupancyMultiplierResolver:
    """Maps catalog component labels to occupancy multipliers."""

    @staticmethod
    def resolve(label: str | None) -> int:
        """Resolve the occupancy multiplier for a component label.

        Matching is a case-insensitive substring search over OCCUPANCY_RULES:
        - "Single Occupancy" → 1
        - "Double Occupancy" → 2
        - "Triple Sharing" → 3
        - "Quad Room" → 4
        - anything else (e.g. "Per Person", "Child with Bed") → 1

        Args:
            label: Free-text attribute name of a price component

        Returns:
            Multiplier between 1 and 4
        """
        name = (label or "").lower()
        for keyword, multiplier in OCCUPANCY_RULES:
            if keyword in name:
                return int(multiplier)
        return int(DEFAULT_MULTIPLIER)


def resolve_multiplier(label: str | None) -> int:
    """Resolve the occupancy multiplier for a component label."""
    return OccupancyMultiplierResolver.resolve(label)
