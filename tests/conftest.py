"""Pytest configuration and shared fixtures"""
import shutil
import sys
import tempfile
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(scope="session")
def project_root_path():
    """Get the project root path"""
    return Path(__file__).parent.parent


@pytest.fixture
def short_tmp_dir():
    """Temporary directory with a short path (Unix socket paths are length limited)"""
    path = Path(tempfile.mkdtemp(prefix="bb"))
    yield path
    shutil.rmtree(path, ignore_errors=True)
