"""
Module principal de l'application FastAPI Haggle.

Ce module configure et initialise l'instance FastAPI, ajoute les middlewares
nécessaires (CORS), monte les fichiers statiques des images locales, et inclut
les routeurs (utilisateurs, sessions, annonces).
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from haggle import __version__
from haggle.adverts.router import advert_router, seller_router
from haggle.auth.router import session_router
from haggle.config import Settings, load_settings
from haggle.database import build_engine, build_session_factory, create_tables
from haggle.exception_handlers import setup_exception_handlers
from haggle.images.dependencies import build_image_storage
from haggle.users.router import user_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Crée le moteur et la factory de sessions au démarrage, les libère à l'arrêt."""
    settings: Settings = app.state.settings
    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    if settings.CREATE_TABLES_ON_STARTUP:
        await create_tables(engine)
    logger.info("Application Haggle démarrée.")
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Moteur de base de données libéré.")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Construit l'application ; la configuration est chargée une seule fois ici."""
    settings = settings or load_settings()

    app = FastAPI(
        title="Haggle API",
        description="API de petites annonces : utilisateurs, sessions et annonces avec image.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.image_storage = build_image_storage(settings)

    # Configurer CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Les images du stockage local sont servies par l'application elle-même
    if settings.IMAGE_STORAGE_BACKEND.lower() == "local":
        images_dir = settings.LOCAL_IMAGE_DIR
        app.mount(
            f"{settings.STATIC_URL_PATH}/images",
            StaticFiles(directory=images_dir, check_dir=False),
            name="images",
        )

    setup_exception_handlers(app)

    # ======================================================
    # Inclure les routeurs
    # ======================================================
    app.include_router(user_router, prefix="/users", tags=["Utilisateurs"])
    app.include_router(seller_router, prefix="/users", tags=["Annonces"])
    app.include_router(session_router, prefix="/sessions", tags=["Authentification"])
    app.include_router(advert_router, prefix="/adverts", tags=["Annonces"])

    @app.get("/", tags=["Santé"])
    async def read_root():
        return {"message": "Hello world", "status": "ok"}

    return app


_settings = load_settings()
configure_logging(_settings.LOG_LEVEL)
app = create_app(_settings)
