"""
Root test configuration.

Test organization:
- unit/        Fast, isolated, no I/O, fake provider clients
- integration/ Component boundaries, real I/O to temp locations

Run specific levels:
    pytest tests/unit -v           # Fast feedback loop
    pytest tests/integration -v    # Before commit
    pytest tests -v                # Everything

No test talks to a real AI provider.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from models import CredentialSet


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast isolated tests")
    config.addinivalue_line("markers", "integration: Component boundary tests")
    config.addinivalue_line("markers", "slow: Tests that take > 1s")


# Keys that match each provider's expected shape
GEMINI_KEY = "AIza" + "x" * 35
OPENAI_KEY = "sk-" + "a" * 48
ANTHROPIC_KEY = "sk-ant-" + "a" * 95
DEEPSEEK_KEY = "sk-" + "b" * 32


@pytest.fixture
def sample_idea():
    """Standard German test idea."""
    return "Bewusstsein ist relational"


@pytest.fixture
def valid_keys():
    return {
        "gemini": GEMINI_KEY,
        "openai": OPENAI_KEY,
        "anthropic": ANTHROPIC_KEY,
        "deepseek": DEEPSEEK_KEY,
    }


@pytest.fixture
def all_credentials(valid_keys):
    """CredentialSet with every provider configured."""
    return CredentialSet(**valid_keys)


@pytest.fixture
def no_credentials():
    return CredentialSet()


@pytest.fixture
def memory_store():
    """Swap the global credential store for an in-memory one."""
    from repositories import configure_backend, get_credential_store
    from config import CREDENTIAL_BACKEND

    configure_backend("memory")
    yield get_credential_store()
    configure_backend(CREDENTIAL_BACKEND)


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """Add timing summary at end of test run."""
    stats = terminalreporter.stats

    # Collect slowest tests
    if 'passed' in stats:
        durations = []
        for report in stats['passed']:
            if hasattr(report, 'duration'):
                durations.append((report.duration, report.nodeid))

        if durations:
            durations.sort(reverse=True)
            terminalreporter.write_sep("=", "slowest 5 tests")
            for duration, nodeid in durations[:5]:
                terminalreporter.write_line(f"  {duration:.2f}s  {nodeid}")
