from .auth import (
    MECHANISMS,
    AuthResults,
    AuthStatus,
    DkimFacts,
    DmarcFacts,
    DomainRecordFacts,
    Grade,
    RecordFacts,
    ScoreFactor,
    SecurityScore,
)
from .history import Assessment, HistoryEntry

__all__ = [
    "MECHANISMS",
    "AuthResults",
    "AuthStatus",
    "DkimFacts",
    "DmarcFacts",
    "DomainRecordFacts",
    "Grade",
    "RecordFacts",
    "ScoreFactor",
    "SecurityScore",
    "Assessment",
    "HistoryEntry",
]
