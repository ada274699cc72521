# emltrust/verifier/header_engine.py
import re
from typing import Iterable, Optional, Tuple

from ..models import AuthResults

Header = Tuple[str, str]

# First occurrence wins; each mechanism only accepts its own status set.
_MECHANISM_PATTERNS = {
    "spf": re.compile(r"spf=(pass|fail|softfail|neutral|none)"),
    "dkim": re.compile(r"dkim=(pass|fail|none)"),
    "dmarc": re.compile(r"dmarc=(pass|fail|none)"),
}

_DKIM_TAG_RE = re.compile(r"([a-z]+)\s*=\s*([^;]*)", re.IGNORECASE)


def find_header(headers: Iterable[Header], name: str) -> Optional[str]:
    name = name.lower()
    for key, value in headers:
        if (key or "").lower() == name:
            return value or ""
    return None


def extract_auth_results(headers: Iterable[Header]) -> Optional[AuthResults]:
    """
    Read SPF/DKIM/DMARC verdicts from the first Authentication-Results header.
    Returns None when the header is missing or carries no recognised verdict.
    """
    value = find_header(headers, "authentication-results")
    if value is None:
        return None

    value = value.lower()
    found = {}
    for mechanism, pattern in _MECHANISM_PATTERNS.items():
        m = pattern.search(value)
        if m:
            found[mechanism] = m.group(1)

    if not found:
        return None
    return AuthResults(**found)


def _parse_dkim_tags(value: str) -> dict:
    tags = {}
    for key, val in _DKIM_TAG_RE.findall(value):
        tags.setdefault(key.lower(), re.sub(r"\s+", "", val))
    return tags


def extract_dkim_selector(headers: Iterable[Header], domain: Optional[str] = None) -> Optional[str]:
    """
    Selector (s=) of a DKIM-Signature header. A signature whose d= matches
    *domain* is preferred over the first one found.
    """
    fallback = None
    for key, value in headers:
        if (key or "").lower() != "dkim-signature":
            continue
        tags = _parse_dkim_tags(value or "")
        selector = tags.get("s")
        if not selector:
            continue
        if domain and tags.get("d", "").lower().rstrip(".") == domain.lower():
            return selector
        if fallback is None:
            fallback = selector
    return fallback
