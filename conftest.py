"""Configure pytest for the note history service."""
import os
import sys
from pathlib import Path

# =============================================================================
# Test Environment Configuration
# =============================================================================
# Set environment for tests BEFORE any imports so the config singleton and
# the database engine pick up the in-memory database.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("HISTORY_DATABASE_URL", "sqlite://")
os.environ.setdefault("HISTORY_JWT_SECRET", "test-secret")

# Add project root so `app` and `history` import without installation
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Ensure environment is set before test collection."""
    os.environ.setdefault("ENV", "test")
    os.environ.setdefault("HISTORY_DATABASE_URL", "sqlite://")
