# emltrust/models/auth.py
import enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class AuthStatus(str, enum.Enum):
    pass_ = "pass"
    fail = "fail"
    softfail = "softfail"
    neutral = "neutral"
    none = "none"


class Grade(str, enum.Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


MECHANISMS = ("spf", "dkim", "dmarc")

DmarcPolicy = Literal["none", "quarantine", "reject"]


class AuthResults(BaseModel):
    """
    Verdicts per mechanism. A field stays None unless a verdict was
    actually determined, so "unknown" never collides with AuthStatus.none.
    """
    spf: Optional[AuthStatus] = None
    dkim: Optional[AuthStatus] = None
    dmarc: Optional[AuthStatus] = None

    def determined(self) -> Dict[str, AuthStatus]:
        return {m: getattr(self, m) for m in MECHANISMS if getattr(self, m) is not None}

    def __bool__(self) -> bool:
        return bool(self.determined())


class RecordFacts(BaseModel):
    record: Optional[str] = None
    exists: bool = False
    # False when no lookup was made (an embedded verdict made it unnecessary)
    checked: bool = True


class DkimFacts(RecordFacts):
    selector: Optional[str] = None


class DmarcFacts(RecordFacts):
    policy: Optional[DmarcPolicy] = None


class DomainRecordFacts(BaseModel):
    domain: str = ""
    spf: RecordFacts = Field(default_factory=RecordFacts)
    dkim: DkimFacts = Field(default_factory=DkimFacts)
    dmarc: DmarcFacts = Field(default_factory=DmarcFacts)

    @classmethod
    def unchecked(cls, domain: str = "") -> "DomainRecordFacts":
        return cls(
            domain=domain,
            spf=RecordFacts(checked=False),
            dkim=DkimFacts(checked=False),
            dmarc=DmarcFacts(checked=False),
        )

    def to_verify_response(self) -> dict:
        """Wire shape of the domain verification endpoint."""
        return {
            "spf": {"record": self.spf.record, "exists": self.spf.exists},
            "dkim": {"record": self.dkim.record, "exists": self.dkim.exists},
            "dmarc": {
                "record": self.dmarc.record,
                "exists": self.dmarc.exists,
                "policy": self.dmarc.policy,
            },
            "domain": self.domain,
        }


class ScoreFactor(BaseModel):
    mechanism: str
    points: int
    max_points: int
    reason: str


class SecurityScore(BaseModel):
    score: int = Field(ge=0, le=100)
    grade: Grade
    factors: List[ScoreFactor] = []
