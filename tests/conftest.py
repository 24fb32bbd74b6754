"""
Pytest configuration and shared fixtures.
"""
import sys
from pathlib import Path

import pytest

# Add project root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import logger  # noqa: E402
from models import PlaylistDocument, Channel, Source  # noqa: E402


@pytest.fixture(autouse=True)
def tmp_log(tmp_path, monkeypatch):
    """Redirect the log file into a temp directory."""
    log_file = tmp_path / "logs" / "LiteIPTV.log"
    monkeypatch.setattr(logger, "LogFile", log_file)
    return log_file


@pytest.fixture
def make_document():
    def _make(content, category="China", name="test"):
        return PlaylistDocument(content=content, category=category, name=name)
    return _make


@pytest.fixture
def make_channel():
    def _make(name="CCTV-1", urls=("http://a.example/1.m3u8",)):
        return Channel(name=name, key=name, sources=[Source(url=u) for u in urls])
    return _make
