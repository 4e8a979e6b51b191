from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from haggle.config import Settings
from haggle.database import get_db_session
from haggle.images.dependencies import get_image_storage
from haggle.images.exceptions import ImageDeletionException, ImageUploadException
from haggle.images.storage import AbstractImageStorage, ImageUpload, StoredImage
from haggle.main import create_app
from haggle.users.models import User
from haggle.users.security import generate_access_token, get_password_hash

# Importés pour enregistrer toutes les tables dans les métadonnées
from haggle.adverts import models as advert_models  # noqa: F401

# URL de base pour la DB en mémoire
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "testpassword"

# Contenu factice : seuls la taille et le type de contenu sont vérifiés
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


# --- Faux stockage d'images ---

class FakeImageStorage(AbstractImageStorage):
    """Stockage d'images en mémoire, avec échec simulable."""

    def __init__(self, fail_upload: bool = False, fail_delete: bool = False):
        self.fail_upload = fail_upload
        self.fail_delete = fail_delete
        self.uploads: List[ImageUpload] = []
        self.deleted: List[str] = []

    async def upload(self, image: ImageUpload) -> StoredImage:
        if self.fail_upload:
            raise ImageUploadException("stockage indisponible")
        self.uploads.append(image)
        image_id = f"img-{len(self.uploads)}"
        return StoredImage(url=f"https://images.test/{image_id}.png", image_id=image_id)

    async def delete(self, image_id: str) -> None:
        if self.fail_delete:
            raise ImageDeletionException(image_id)
        self.deleted.append(image_id)


# --- Fixtures de Base ---

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=TEST_DATABASE_URL,
        CREATE_TABLES_ON_STARTUP=False,
        IMAGE_STORAGE_BACKEND="local",
        LOCAL_IMAGE_DIR=str(tmp_path / "images"),
        PUBLIC_BASE_URL="http://test",
        ADVERTS_BATCH_SIZE=2,
        MAX_IMAGE_SIZE_BYTES=1024,
    )


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Un moteur en mémoire par test ; StaticPool garde une seule connexion partagée."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Fournit une session DB en mémoire pour chaque test."""
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def image_storage() -> FakeImageStorage:
    return FakeImageStorage()


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest_asyncio.fixture(scope="function")
async def test_client(
    app: FastAPI,
    db_session: AsyncSession,
    image_storage: FakeImageStorage,
) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx qui utilise la session DB de test et le faux stockage."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# --- Fixtures Utilisateur et Authentification ---

@pytest_asyncio.fixture(scope="function")
async def test_user(db_session: AsyncSession) -> User:
    """Crée un utilisateur standard directement en base."""
    user = User(
        name="Test User",
        email="testuser@example.com",
        password_hash=get_password_hash(TEST_PASSWORD),
        access_token=generate_access_token(),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict[str, str]:
    """En-tête d'authentification : le token brut, sans préfixe."""
    return {"Authorization": test_user.access_token}


@pytest.fixture
def advert_form() -> dict[str, object]:
    """Champs valides d'une annonce, tels qu'envoyés en multipart."""
    return {
        "title": "Lampe",
        "description": "Lampe vintage",
        "price": "120",
        "delivery": ["Pick up"],
        "category": "Lightning",
        "condition": "Good",
    }


@pytest.fixture
def image_file() -> dict[str, tuple]:
    return {"image": ("lampe.png", PNG_BYTES, "image/png")}
