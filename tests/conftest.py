"""
Pytest configuration and fixtures.
"""

import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

from auth.credentials import CredentialStore
from auth.tokens import TokenService
from core.models import Memo, User
from core.storage import InMemoryRecordStore, JsonFileRecordStore
from manager.memo_service import MemoService


TEST_SECRET = "test-secret"
TEST_ITERATIONS = 1000


@pytest.fixture
def data_dir(tmp_path):
    """Empty directory for collection files."""
    return tmp_path / "data"


@pytest_asyncio.fixture
async def memo_store(data_dir):
    """Bootstrapped file store for memos."""
    store = JsonFileRecordStore(data_dir / "memos.json", Memo)
    await store.setup()
    return store


@pytest_asyncio.fixture
async def user_store(data_dir):
    """Bootstrapped file store for users."""
    store = JsonFileRecordStore(data_dir / "users.json", User)
    await store.setup()
    return store


@pytest.fixture
def token_service():
    return TokenService(secret=TEST_SECRET)


@pytest.fixture
def credential_store(user_store):
    return CredentialStore(user_store, hash_iterations=TEST_ITERATIONS)


@pytest.fixture
def memo_service(memo_store, token_service):
    return MemoService(memo_store, token_service)


@pytest.fixture
def memory_memo_store():
    return InMemoryRecordStore(Memo, name="memos")
