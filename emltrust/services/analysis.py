# emltrust/services/analysis.py
import logging
from typing import Optional

from ..models import Assessment, AuthResults, DomainRecordFacts
from ..utils.parser import parse_eml_bytes
from ..verifier import auth_engine, header_engine
from ..verifier.score_engine import compute_security_score
from .history import HistoryStore

logger = logging.getLogger("emltrust.analysis")


async def analyze_eml(
    raw: bytes,
    history: Optional[HistoryStore] = None,
    dkim_selector: Optional[str] = None,
    use_dns: bool = True,
    timeout: Optional[float] = None,
) -> Assessment:
    """
    raw EML bytes -> headers -> verdicts / record facts -> score.
    The result is recorded in *history* when one is given.
    """
    parsed = parse_eml_bytes(raw)
    domain = parsed["from_domain"]

    if use_dns:
        auth, records = await auth_engine.verify_authentication(
            parsed["headers"], domain, dkim_selector=dkim_selector, timeout=timeout,
        )
    else:
        auth = header_engine.extract_auth_results(parsed["headers"]) or AuthResults()
        records = DomainRecordFacts.unchecked(domain or "")

    security = compute_security_score(auth, records)
    logger.info(
        "Assessed %s from=%s score=%d grade=%s",
        parsed["hash"][:12], domain, security.score, security.grade.value,
    )

    entry = None
    if history is not None:
        entry = await history.add(
            hash=parsed["hash"],
            score=security.score,
            grade=security.grade,
            from_domain=domain,
            subject=parsed["subject"],
            date=parsed["date"],
        )

    return Assessment(
        hash=parsed["hash"],
        from_domain=domain,
        subject=parsed["subject"],
        date=parsed["date"],
        auth_results=auth,
        records=records,
        security=security,
        history_entry=entry,
    )
