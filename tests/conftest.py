"""
Pytest configuration file for SUBPACE tests.
"""
import asyncio
import os
import sys
import pytest

# Add the parent directory to sys.path to allow importing subpace
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from subpace.core.interfaces import LookupFailure, LookupOutcome, ResolverClient


class StubResolver(ResolverClient):
    """Resolver client answering from a fixed table.

    Names missing from the table get the default outcome. Every lookup is
    recorded in call order, and the highest number of concurrent lookups is
    tracked.
    """

    def __init__(self, outcomes=None, default=None, delay=0.0):
        self.outcomes = outcomes or {}
        self.default = default or LookupOutcome.failed(LookupFailure.NO_RECORDS_FOUND)
        self.delay = delay
        self.calls = []
        self.active = 0
        self.peak_active = 0

    async def lookup(self, name):
        self.calls.append(name)
        self.active += 1
        self.peak_active = max(self.peak_active, self.active)
        try:
            delay = self.delay(name) if callable(self.delay) else self.delay
            await asyncio.sleep(delay)
            outcome = self.outcomes.get(name, self.default)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.active -= 1


# Common fixtures for tests
@pytest.fixture
def sample_domain():
    """Return a sample domain for testing."""
    return "example.com"

@pytest.fixture
def sample_labels():
    """Return a list of sample candidate labels for testing."""
    return ["www", "api", "mail", "blog", "dev"]

@pytest.fixture
def stub_resolver_class():
    """Return the stub resolver class."""
    return StubResolver

@pytest.fixture
def mock_dns_response():
    """Return stub outcomes keyed by name."""
    return {
        "www.example.com": LookupOutcome.success(["93.184.216.34"]),
        "api.example.com": LookupOutcome.success(["93.184.216.35", "2606:2800:220:1::"]),
        "mail.example.com": LookupOutcome.success(["93.184.216.36"]),
        "slow.example.com": LookupOutcome.failed(LookupFailure.TIMEOUT),
        "dev.example.com": LookupOutcome.failed(LookupFailure.NO_RECORDS_FOUND),
    }

@pytest.fixture
def wordlist_file(tmp_path):
    """Return a factory writing a wordlist file and returning its path."""
    def _write(lines, newline="\n"):
        path = tmp_path / "words.txt"
        path.write_bytes(newline.join(lines).encode("utf-8") + newline.encode("utf-8"))
        return str(path)
    return _write
