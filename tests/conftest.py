"""Pytest configuration for all tests."""

import random
from unittest.mock import AsyncMock

import pytest

from boothcode.core.config import Settings
from boothcode.domain.services.booth_sync_service import BoothCodeSyncService
from boothcode.domain.services.seller_code_generator import SellerCodeGenerator
from boothcode.infrastructure.registry import InMemoryCodeRegistry
from boothcode.infrastructure.services.collection_provider import CollectionProvider
from boothcode.infrastructure.services.seller_directory_provider import SellerDirectoryProvider


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        environment="testing",
        shop_domain="test-shop.myshopify.com",
        admin_api_token="shpat_test_token",
        registry_backend="memory",
        registry_path=str(tmp_path / "used_codes.json"),
        database_url="sqlite+aiosqlite:///:memory:",
        log_format="console",
    )


@pytest.fixture
def registry() -> InMemoryCodeRegistry:
    """Empty in-memory code registry."""
    return InMemoryCodeRegistry()


@pytest.fixture
def generator(registry: InMemoryCodeRegistry) -> SellerCodeGenerator:
    """Code generator with a seeded random source."""
    return SellerCodeGenerator(registry, rng=random.Random(1234))


@pytest.fixture
def collections() -> AsyncMock:
    """Collection provider mock; no collection has a code by default."""
    provider = AsyncMock(spec=CollectionProvider)
    provider.get_stored_code.return_value = None
    provider.find_by_handle.return_value = None
    return provider


@pytest.fixture
def sellers() -> AsyncMock:
    """Seller directory mock."""
    return AsyncMock(spec=SellerDirectoryProvider)


@pytest.fixture
def sync_service(
    generator: SellerCodeGenerator, collections: AsyncMock, sellers: AsyncMock
) -> BoothCodeSyncService:
    """Sync service wired to mocked remote providers."""
    return BoothCodeSyncService(
        generator=generator,
        collections=collections,
        sellers=sellers,
        default_title="Untitled",
    )
