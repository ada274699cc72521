# emltrust/verifier/__init__.py

from .header_engine import (
    extract_auth_results,
    extract_dkim_selector,
)

from .dns_engine import (
    lookup_txt,
    check_spf,
    check_dkim,
    check_dmarc,
    verify_domain,
)
from .auth_engine import verify_authentication
from .score_engine import compute_security_score, grade_for_score

__all__ = [
    "extract_auth_results",
    "extract_dkim_selector",
    "lookup_txt",
    "check_spf",
    "check_dkim",
    "check_dmarc",
    "verify_domain",
    "verify_authentication",
    "compute_security_score",
    "grade_for_score",
]
