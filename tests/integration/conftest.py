"""Shared fixtures for integration tests.

Integration tests enumerate the real devices of the host and are skipped
on platforms without a live device source.
"""

import pytest


@pytest.fixture
def real_config():
    """Create a real Config pointing to a temporary directory."""
    import tempfile
    from pathlib import Path

    from dmascan.core.config import Config

    with tempfile.TemporaryDirectory(prefix="dmascan_test_") as tmpdir:
        config = Config(config_dir=Path(tmpdir))
        config.ensure_directories()
        yield config

