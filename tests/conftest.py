import pytest
import dns.resolver

from emltrust.services.history import HistoryStore
from emltrust.services.storage import MemoryBackend
from emltrust.verifier import dns_engine


class FakeZone:
    """TXT answers by name; unknown names behave like NXDOMAIN."""

    def __init__(self, records=None):
        self.records = dict(records or {})
        self.queries = []

    async def query(self, name, timeout):
        self.queries.append(name)
        if name not in self.records:
            raise dns.resolver.NXDOMAIN()
        return list(self.records[name])


@pytest.fixture
def zone(monkeypatch):
    z = FakeZone()
    monkeypatch.setattr(dns_engine, "_query_txt", z.query)
    return z


@pytest.fixture
def history():
    return HistoryStore(backend=MemoryBackend(), key="test-history", max_entries=50)


def build_eml(auth_results=None, from_addr="Alice <alice@example.com>", subject="Quarterly report",
              dkim_signature=None, body="Hello"):
    lines = []
    if auth_results is not None:
        lines.append(f"Authentication-Results: mx.receiver.test; {auth_results}")
    if dkim_signature is not None:
        lines.append(f"DKIM-Signature: {dkim_signature}")
    lines += [
        f"From: {from_addr}",
        "To: bob@receiver.test",
        f"Subject: {subject}",
        "Date: Mon, 6 Jan 2025 10:00:00 +0000",
        "Message-ID: <abc123@example.com>",
        "",
        body,
        "",
    ]
    return "\r\n".join(lines).encode("utf-8")


@pytest.fixture
def make_eml():
    return build_eml
