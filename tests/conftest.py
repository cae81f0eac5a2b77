"""Root conftest — shared test configuration."""
import os

# Point the application at throwaway infrastructure before it is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("EVENT_PUBLISHER", "noop")
os.environ.setdefault("SESSION_SECRET", "test-secret")
