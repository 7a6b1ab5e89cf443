"""
Enumerations for the cognitive-game screening core.
"""

from enum import Enum


class EvidenceLevel(Enum):
    """Ordinal confidence grade attached to a diagnostic criterion."""
    NONE = "none"
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"

    @property
    def rank(self) -> int:
        """Position on the ordinal scale (none=0 ... strong=3)."""
        return _EVIDENCE_ORDER.index(self)

    def __lt__(self, other: 'EvidenceLevel') -> bool:
        if not isinstance(other, EvidenceLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: 'EvidenceLevel') -> bool:
        if not isinstance(other, EvidenceLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: 'EvidenceLevel') -> bool:
        if not isinstance(other, EvidenceLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: 'EvidenceLevel') -> bool:
        if not isinstance(other, EvidenceLevel):
            return NotImplemented
        return self.rank >= other.rank


_EVIDENCE_ORDER = (
    EvidenceLevel.NONE,
    EvidenceLevel.WEAK,
    EvidenceLevel.MODERATE,
    EvidenceLevel.STRONG,
)


class Domain(Enum):
    """Symptom domains of the criterion catalogue."""
    INATTENTION = "Inattention"
    HYPERACTIVITY_IMPULSIVITY = "Hyperactivity-Impulsivity"


class RiskBand(Enum):
    """Coarse per-game risk bucket."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GameType(Enum):
    """Instrumented mini-games."""
    GO_NO_GO = "go_no_go"
    STOP_SIGNAL = "stop_signal"
    TOWER_OF_LONDON = "tower_of_london"
