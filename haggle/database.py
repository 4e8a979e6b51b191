import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from haggle.config import Settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Crée le moteur de base de données asynchrone à partir de la configuration."""
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO_LOG,
        pool_pre_ping=True,
    )
    logger.info("Moteur SQLAlchemy Async configuré (dialecte: %s).", engine.dialect.name)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Crée la factory de sessions liée au moteur."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Empêche les objets d'expirer après commit
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Crée toutes les tables définies par les modèles SQLModel."""
    # Les modèles doivent être importés pour être enregistrés dans les métadonnées
    from haggle.adverts import models as advert_models  # noqa: F401
    from haggle.users import models as user_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Tables créées (si absentes).")


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dépendance FastAPI fournissant une session asynchrone par requête.

    La factory est construite une seule fois au démarrage et stockée sur
    ``app.state``. Aucun commit n'est fait ici : chaque dépôt valide ses
    propres écritures.
    """
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        logger.error("La factory de session SQLAlchemy n'est pas initialisée.")
        raise RuntimeError("Database session factory is not initialized.")

    async with session_factory() as session:
        try:
            yield session
        except Exception as e:
            logger.error("Erreur durant la session DB, rollback: %s", e, exc_info=True)
            await session.rollback()
            raise
        finally:
            await session.close()
            logger.debug("Session DB fermée.")
