# emltrust/verifier/auth_engine.py
import asyncio
import logging
from typing import Iterable, Optional, Tuple

from ..models import AuthResults, DomainRecordFacts
from . import dns_engine
from .header_engine import Header, extract_auth_results, extract_dkim_selector

logger = logging.getLogger("emltrust.verifier")


async def verify_authentication(
    headers: Iterable[Header],
    domain: Optional[str],
    dkim_selector: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Tuple[AuthResults, DomainRecordFacts]:
    """
    Combine embedded Authentication-Results verdicts with DNS record facts.

    A verdict found in the headers is authoritative for its mechanism and no
    lookup is made for it. Every other mechanism gets a record lookup, all of
    them issued concurrently. Record existence is reported in the facts only;
    it never turns into a pass/fail verdict.
    """
    headers = list(headers)
    auth = extract_auth_results(headers) or AuthResults()
    domain = (domain or "").strip().lower().rstrip(".")
    facts = DomainRecordFacts.unchecked(domain)

    if not domain:
        logger.info("No sender domain; skipping record lookups")
        return auth, facts

    selector = dkim_selector or extract_dkim_selector(headers, domain)

    lookups = {}
    if auth.spf is None:
        lookups["spf"] = dns_engine.check_spf(domain, timeout)
    if auth.dkim is None:
        lookups["dkim"] = dns_engine.check_dkim(domain, selector, timeout)
    if auth.dmarc is None:
        lookups["dmarc"] = dns_engine.check_dmarc(domain, timeout)

    if lookups:
        logger.debug("Looking up %s records for %s", ",".join(lookups), domain)
        results = await asyncio.gather(*lookups.values(), return_exceptions=True)
        for mechanism, result in zip(lookups, results):
            if isinstance(result, Exception):
                logger.warning("%s lookup for %s failed: %s", mechanism, domain, result)
                result = type(getattr(facts, mechanism))()
            setattr(facts, mechanism, result)

    return auth, facts
