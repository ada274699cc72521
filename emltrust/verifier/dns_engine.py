# emltrust/verifier/dns_engine.py
import asyncio
import logging
import re
from typing import List, Optional

import dns.asyncresolver
import dns.exception

from ..config import settings
from ..models import DkimFacts, DmarcFacts, DomainRecordFacts, RecordFacts

logger = logging.getLogger("emltrust.dns")

_DKIM_KEY_RE = re.compile(r"(?:^|;)\s*p=")
# tag-anchored so sp= (subdomain policy) is never read as p=
_DMARC_POLICY_RE = re.compile(r"(?:^|;)\s*p=(none|quarantine|reject)")

_resolver = None


def get_resolver() -> dns.asyncresolver.Resolver:
    """Lazy resolver creation, honouring DNS_NAMESERVERS when set."""
    global _resolver
    if _resolver is None:
        _resolver = dns.asyncresolver.Resolver()
        if settings.DNS_NAMESERVERS:
            _resolver.nameservers = list(settings.DNS_NAMESERVERS)
    return _resolver


async def _query_txt(name: str, timeout: float) -> List[str]:
    answers = await get_resolver().resolve(name, "TXT", lifetime=timeout)
    records = []
    for rdata in answers:
        # long TXT records arrive split into several character-strings
        records.append(b"".join(rdata.strings).decode("utf-8", errors="replace"))
    return records


async def lookup_txt(name: str, timeout: Optional[float] = None) -> List[str]:
    """
    Return the TXT strings published at *name*.
    If none or error -> return [].
    """
    if not name:
        return []
    if timeout is None:
        timeout = settings.DNS_TIMEOUT
    try:
        return await asyncio.wait_for(_query_txt(name, timeout), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("TXT lookup timed out for %s after %.1fs", name, timeout)
        return []
    except dns.exception.DNSException as e:
        logger.debug("TXT lookup failed for %s: %s", name, e)
        return []
    except Exception:
        logger.exception("Unexpected error during TXT lookup for %s", name)
        return []


def extract_dmarc_policy(record: str) -> Optional[str]:
    m = _DMARC_POLICY_RE.search(record or "")
    return m.group(1) if m else None


async def check_spf(domain: str, timeout: Optional[float] = None) -> RecordFacts:
    for txt in await lookup_txt(domain, timeout):
        if txt.startswith("v=spf1"):
            return RecordFacts(record=txt, exists=True)
    return RecordFacts()


async def check_dkim(domain: str, selector: Optional[str] = None, timeout: Optional[float] = None) -> DkimFacts:
    queried = selector or settings.DEFAULT_DKIM_SELECTOR
    for txt in await lookup_txt(f"{queried}._domainkey.{domain}", timeout):
        if _DKIM_KEY_RE.search(txt):
            return DkimFacts(record=txt, exists=True, selector=queried)
    # a fallback selector that found nothing is not reported
    return DkimFacts(selector=selector or None)


async def check_dmarc(domain: str, timeout: Optional[float] = None) -> DmarcFacts:
    for txt in await lookup_txt(f"_dmarc.{domain}", timeout):
        if txt.startswith("v=DMARC1"):
            return DmarcFacts(record=txt, exists=True, policy=extract_dmarc_policy(txt))
    return DmarcFacts()


async def verify_domain(
    domain: str,
    dkim_selector: Optional[str] = None,
    sender_ip: Optional[str] = None,
    timeout: Optional[float] = None,
) -> DomainRecordFacts:
    """
    Look up SPF, DKIM and DMARC records for *domain* concurrently.
    sender_ip is accepted for API compatibility; records are not evaluated
    against it.
    """
    domain = (domain or "").strip().lower().rstrip(".")
    if not domain:
        return DomainRecordFacts()

    spf, dkim, dmarc = await asyncio.gather(
        check_spf(domain, timeout),
        check_dkim(domain, dkim_selector, timeout),
        check_dmarc(domain, timeout),
    )
    logger.info(
        "Records for %s: spf=%s dkim=%s dmarc=%s",
        domain, spf.exists, dkim.exists, dmarc.exists,
    )
    return DomainRecordFacts(domain=domain, spf=spf, dkim=dkim, dmarc=dmarc)
