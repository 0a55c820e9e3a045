from pathlib import Path
import base64
import sys

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from main import create_app  # noqa: E402
from src.core.database import Base, get_db  # noqa: E402
from src.core.deps import get_auth_config  # noqa: E402
from src.core.security import AuthConfig  # noqa: E402
from src.modules.products import models  # noqa: E402,F401


def _generate_rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _private_pem(key: rsa.RSAPrivateKey) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def _public_key_b64(key: rsa.RSAPrivateKey) -> str:
    pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.b64encode(pem).decode("ascii")


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return _generate_rsa_key()


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    return _private_pem(rsa_private_key)


@pytest.fixture(scope="session")
def public_key_b64(rsa_private_key) -> str:
    return _public_key_b64(rsa_private_key)


@pytest.fixture(scope="session")
def other_private_key_pem() -> str:
    return _private_pem(_generate_rsa_key())


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
    async with SessionLocal() as session:
        yield session
    await engine.dispose()


def _build_client(db_session, auth_config: AuthConfig) -> AsyncClient:
    app = create_app()

    async def override_db():
        yield db_session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_auth_config] = lambda: auth_config

    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://testserver")


@pytest_asyncio.fixture
async def client(db_session):
    async with _build_client(db_session, AuthConfig(enabled=False, public_key_b64="")) as api_client:
        yield api_client


@pytest_asyncio.fixture
async def auth_client(db_session, public_key_b64):
    async with _build_client(db_session, AuthConfig(enabled=True, public_key_b64=public_key_b64)) as api_client:
        yield api_client
