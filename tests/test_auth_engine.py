import asyncio

import pytest

from emltrust.models import AuthStatus
from emltrust.verifier import dns_engine
from emltrust.verifier.auth_engine import verify_authentication
from emltrust.verifier.score_engine import compute_security_score


@pytest.mark.asyncio
async def test_embedded_verdicts_skip_dns(zone):
    headers = [("Authentication-Results", "mx.test; spf=pass dkim=pass dmarc=pass")]

    auth, facts = await verify_authentication(headers, "example.com")

    assert auth.determined() == {"spf": AuthStatus.pass_, "dkim": AuthStatus.pass_, "dmarc": AuthStatus.pass_}
    assert zone.queries == []
    assert facts.domain == "example.com"
    assert not facts.spf.checked and not facts.dkim.checked and not facts.dmarc.checked


@pytest.mark.asyncio
async def test_only_missing_mechanisms_are_looked_up(zone):
    zone.records["_dmarc.example.com"] = ["v=DMARC1; p=quarantine"]
    headers = [("Authentication-Results", "mx.test; spf=pass")]

    auth, facts = await verify_authentication(headers, "example.com", dkim_selector="sel")

    assert auth.spf == AuthStatus.pass_
    assert auth.dkim is None and auth.dmarc is None
    assert sorted(zone.queries) == ["_dmarc.example.com", "sel._domainkey.example.com"]
    assert facts.spf.checked is False
    assert facts.dkim.checked is True and facts.dkim.exists is False
    assert facts.dmarc.exists is True and facts.dmarc.policy == "quarantine"


@pytest.mark.asyncio
async def test_record_existence_never_becomes_a_verdict(zone):
    zone.records["example.com"] = ["v=spf1 -all"]

    auth, facts = await verify_authentication([], "example.com")

    assert auth.determined() == {}
    assert facts.spf.exists is True


@pytest.mark.asyncio
async def test_selector_taken_from_dkim_signature(zone):
    zone.records["mail2024._domainkey.example.com"] = ["v=DKIM1; p=MIIB"]
    headers = [("DKIM-Signature", "v=1; a=rsa-sha256; d=example.com; s=mail2024; bh=x; b=y")]

    _, facts = await verify_authentication(headers, "example.com")

    assert facts.dkim.exists is True
    assert facts.dkim.selector == "mail2024"


@pytest.mark.asyncio
async def test_explicit_selector_overrides_signature(zone):
    headers = [("DKIM-Signature", "v=1; d=example.com; s=mail2024; bh=x; b=y")]

    await verify_authentication(headers, "example.com", dkim_selector="manual")

    assert "manual._domainkey.example.com" in zone.queries
    assert "mail2024._domainkey.example.com" not in zone.queries


@pytest.mark.asyncio
async def test_no_domain_skips_dns(zone):
    auth, facts = await verify_authentication([("Authentication-Results", "dkim=fail")], None)

    assert auth.dkim == AuthStatus.fail
    assert zone.queries == []
    assert facts.domain == ""


@pytest.mark.asyncio
async def test_dkim_timeout_without_embedded_results(monkeypatch):
    records = {"example.com": ["v=spf1 -all"], "_dmarc.example.com": ["v=DMARC1; p=reject"]}

    async def query(name, timeout):
        if "._domainkey." in name:
            await asyncio.sleep(1)
        return records.get(name, [])

    monkeypatch.setattr(dns_engine, "_query_txt", query)

    auth, facts = await verify_authentication([], "example.com", timeout=0.05)

    assert facts.dkim.exists is False
    assert facts.spf.exists is True
    assert facts.dmarc.exists is True

    score = compute_security_score(auth, facts)
    dkim_factor = next(f for f in score.factors if f.mechanism == "dkim")
    assert dkim_factor.points == 0
    assert score.score == 15 + 15 + 15


@pytest.mark.asyncio
async def test_failed_check_degrades_to_absent(monkeypatch, zone):
    async def boom(domain, timeout=None):
        raise RuntimeError("resolver exploded")

    monkeypatch.setattr(dns_engine, "check_spf", boom)
    zone.records["_dmarc.example.com"] = ["v=DMARC1; p=none"]

    _, facts = await verify_authentication([], "example.com")

    assert facts.spf.exists is False
    assert facts.dmarc.exists is True
