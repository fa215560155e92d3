import os
from typing import AsyncGenerator, Callable, Dict, Optional

# Settings are read at import time; point them at test values first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_school_fees.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.core.models  # noqa: F401
from app.auth.security import create_access_token
from app.db.session import Base, get_db
from app.main import app as fastapi_app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test; overrides the FastAPI session dependency."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        fastapi_app.dependency_overrides[get_db] = override_get_db
        yield session

    fastapi_app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def auth_headers() -> Callable[..., Dict[str, str]]:
    """Build bearer headers for a role (and optional linked student)."""

    def _make(role: str, student_id: Optional[str] = None, user_id: str = "USER#1") -> Dict[str, str]:
        subject = {"sub": user_id, "role": role}
        if student_id:
            subject["student_id"] = student_id
        token = create_access_token(subject=subject)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def admin_headers(auth_headers) -> Dict[str, str]:
    return auth_headers("ADMIN")
