"""
Integration test fixtures.

Integration tests:
- Test component boundaries
- Use real I/O but to temp locations
- Should be deterministic
"""

import pytest
import tempfile
import shutil
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Temporary directory for test data."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def credentials_file(temp_dir):
    return temp_dir / "weitblick" / "credentials.json"


@pytest.fixture
def client(memory_store):
    """Flask test client over an empty in-memory credential store."""
    import app
    from routes.helpers import registry

    yield app.app.test_client()
    registry.clear()
