# emltrust/models/history.py
from typing import Optional

from pydantic import BaseModel

from .auth import AuthResults, DomainRecordFacts, Grade, SecurityScore


class HistoryEntry(BaseModel):
    id: str
    hash: str
    from_domain: Optional[str] = None
    subject: Optional[str] = None
    date: Optional[str] = None
    score: int
    grade: Grade
    verified_at: str


class Assessment(BaseModel):
    hash: str
    from_domain: Optional[str] = None
    subject: Optional[str] = None
    date: Optional[str] = None
    auth_results: AuthResults
    records: DomainRecordFacts
    security: SecurityScore
    history_entry: Optional[HistoryEntry] = None
