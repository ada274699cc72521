# emltrust/utils/parser.py
import email
import email.message
import hashlib
import re
from email.header import decode_header, make_header
from email.utils import getaddresses
from typing import List, Optional, Tuple

_DOMAIN_RE = re.compile(r"@([A-Za-z0-9.-]+)")


def compute_sha256(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


def extract_domain(address: str) -> Optional[str]:
    if not address:
        return None
    for _, addr in getaddresses([address]):
        m = _DOMAIN_RE.search(addr or "")
        if m:
            return m.group(1).lower().rstrip(".")
    m = _DOMAIN_RE.search(address)
    if m:
        return m.group(1).lower().rstrip(".")
    return None


def _safe_header(msg: email.message.Message, name: str) -> Optional[str]:
    try:
        val = msg.get(name)
        if val is None:
            return None
        return str(val)
    except Exception:
        return None


def _decode(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return str(make_header(decode_header(value)))
    except Exception:
        return value


def parse_eml_bytes(raw: bytes) -> dict:
    """
    Header-level view of an EML file: ordered headers, sender domain,
    subject, date and the SHA-256 of the raw bytes.
    """
    # compat32 policy: lenient with the malformed headers common in spam
    msg = email.message_from_bytes(raw)
    headers: List[Tuple[str, str]] = [(k, str(v)) for k, v in msg.items()]
    from_header = _safe_header(msg, "From")
    return {
        "hash": compute_sha256(raw),
        "headers": headers,
        "from": from_header,
        "from_domain": extract_domain(from_header or ""),
        "subject": _decode(_safe_header(msg, "Subject")),
        "date": _safe_header(msg, "Date"),
    }
