from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

# Keep the module-level engine away from the real database file.
os.environ.setdefault(
    "DATABASE_URL", f"sqlite+aiosqlite:///{Path(tempfile.mkdtemp()) / 'promptvault-test.db'}"
)

import pytest
from fastapi.testclient import TestClient

from .database import build_app, build_database


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    _engine, override = asyncio.run(build_database(tmp_path / "vault.db"))
    return TestClient(build_app(override))
