"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest

from millbook.application import MillbookServices, create_services
from millbook.config import reset_settings
from millbook.core.entities.stock import ProductType
from millbook.core.entities.user import User

OWNER_PASSWORD = "owner-pass"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a temp data dir and use cheap bcrypt rounds."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SECURITY_BCRYPT_ROUNDS", "4")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
async def services(tmp_path: Path) -> AsyncGenerator[MillbookServices, None]:
    """Fully wired services on a fresh database."""
    container = await create_services(db_path=tmp_path / "mill.db", configure_logs=False)
    yield container
    await container.close()


@pytest.fixture
def owner_password() -> str:
    return OWNER_PASSWORD


@pytest.fixture
async def owner(services: MillbookServices) -> User:
    return await services.identity.initialize(
        login_id="Owner",
        display_name="Mill Owner",
        password=OWNER_PASSWORD,
    )


@pytest.fixture
async def supervisor(services: MillbookServices, owner: User) -> User:
    created = await services.identity.create_supervisor(owner, "Ravi Kumar", "ravi")
    return created.user


@pytest.fixture
async def stocked(services: MillbookServices, owner: User) -> MillbookServices:
    """100 kg oil and 50 kg cake on hand, each from an approved adjustment."""
    for product, qty in ((ProductType.OIL, 100.0), (ProductType.CAKE, 50.0)):
        adj = await services.adjustments.request_adjustment(owner, product, qty, "opening balance")
        await services.adjustments.approve(owner, adj.id)
    return services
