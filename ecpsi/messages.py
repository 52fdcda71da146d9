from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Tuple

from .errors import InvalidBlindedPointsError


@dataclass(frozen=True)
class BlindedPointsMessage:
    """Round one payload: one compressed secret*H(m) per distinct element.

    Carries no digests or element identities, only the points in the order
    the sender hashed them.
    """
    blinded_points: Tuple[bytes, ...]

    def __post_init__(self):
        object.__setattr__(self, "blinded_points", tuple(self.blinded_points))

    @classmethod
    def validated(cls, blinded_points: Iterable[bytes]) -> "BlindedPointsMessage":
        msg = cls(tuple(blinded_points))
        if not msg:
            raise InvalidBlindedPointsError("Blinded points vector cannot be empty")
        return msg

    def __len__(self):
        return len(self.blinded_points)

    def __iter__(self):
        return iter(self.blinded_points)


@dataclass(frozen=True)
class DoubleBlindedPointsMessage:
    """Round two reply, position-aligned with the peer's BlindedPointsMessage."""
    double_blinded_points: Tuple[bytes, ...]

    def __post_init__(self):
        object.__setattr__(self, "double_blinded_points", tuple(self.double_blinded_points))

    def __len__(self):
        return len(self.double_blinded_points)

    def __iter__(self):
        return iter(self.double_blinded_points)


@dataclass
class IntersectionResult:
    intersection_hashes: FrozenSet[bytes] = frozenset()
    # digest -> compressed double-blinded point
    double_blinded_map: Dict[bytes, bytes] = field(default_factory=dict)

    def __len__(self):
        return len(self.intersection_hashes)

    def __contains__(self, digest):
        return digest in self.intersection_hashes

    def ordered(self, digests: Iterable[bytes]) -> List[bytes]:
        """Intersection digests in the order they appear in `digests`."""
        return [d for d in digests if d in self.intersection_hashes]
