# emltrust/verifier/score_engine.py
import logging
from typing import Any, Tuple

from pydantic import ValidationError

from ..models import AuthResults, AuthStatus, DomainRecordFacts, Grade, ScoreFactor, SecurityScore

logger = logging.getLogger("emltrust.score")

BASELINE = 15

MAX_POINTS = {"spf": 30, "dkim": 30, "dmarc": 25}

_GRADE_THRESHOLDS = (
    (90, Grade.A),
    (75, Grade.B),
    (60, Grade.C),
    (40, Grade.D),
)


def grade_for_score(score: int) -> Grade:
    score = max(0, min(100, int(score)))
    for threshold, grade in _GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return Grade.F


def _spf_points(auth: AuthResults, records: DomainRecordFacts) -> Tuple[int, str]:
    if auth.spf is not None:
        if auth.spf == AuthStatus.pass_:
            return 30, "spf=pass"
        if auth.spf in (AuthStatus.softfail, AuthStatus.neutral):
            return 10, f"spf={auth.spf.value}"
        return 0, f"spf={auth.spf.value}"
    if records.spf.exists:
        return 15, "SPF record published, no verdict"
    return 0, "no SPF verdict or record"


def _dkim_points(auth: AuthResults, records: DomainRecordFacts) -> Tuple[int, str]:
    if auth.dkim is not None:
        if auth.dkim == AuthStatus.pass_:
            return 30, "dkim=pass"
        return 0, f"dkim={auth.dkim.value}"
    if records.dkim.exists:
        return 15, f"DKIM key published at selector {records.dkim.selector}, no verdict"
    return 0, "no DKIM verdict or key"


def _dmarc_points(auth: AuthResults, records: DomainRecordFacts) -> Tuple[int, str]:
    if auth.dmarc is not None:
        if auth.dmarc == AuthStatus.pass_:
            return 25, "dmarc=pass"
        return 0, f"dmarc={auth.dmarc.value}"
    if records.dmarc.exists:
        if records.dmarc.policy in ("reject", "quarantine"):
            return 15, f"DMARC policy {records.dmarc.policy}, no verdict"
        # p=none and unparseable policies only monitor
        return 5, f"DMARC policy {records.dmarc.policy or 'unknown'}, no verdict"
    return 0, "no DMARC verdict or record"


def compute_security_score(auth: Any, records: Any) -> SecurityScore:
    """
    Return a 0-100 score and A-F grade for the given verdicts and records.

    SPF and DKIM are worth up to 30 points each, DMARC up to 25, plus a flat
    15 point baseline. When no mechanism earns anything the score is 0.
    Input that does not validate scores 0 / F.
    """
    try:
        auth = AuthResults() if auth is None else AuthResults.model_validate(auth)
        records = DomainRecordFacts() if records is None else DomainRecordFacts.model_validate(records)
    except (ValidationError, TypeError, ValueError) as e:
        logger.warning("Malformed scoring input, scoring as 0: %s", e)
        return SecurityScore(score=0, grade=Grade.F)

    factors = []
    for mechanism, rule in (("spf", _spf_points), ("dkim", _dkim_points), ("dmarc", _dmarc_points)):
        points, reason = rule(auth, records)
        factors.append(ScoreFactor(
            mechanism=mechanism,
            points=points,
            max_points=MAX_POINTS[mechanism],
            reason=reason,
        ))

    earned = sum(f.points for f in factors)
    if earned == 0:
        score = 0
    else:
        score = max(0, min(100, earned + BASELINE))
        factors.append(ScoreFactor(
            mechanism="baseline",
            points=BASELINE,
            max_points=BASELINE,
            reason="authentication infrastructure present",
        ))

    return SecurityScore(score=score, grade=grade_for_score(score), factors=factors)
