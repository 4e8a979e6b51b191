"""Gestionnaires d'exceptions centralisés pour l'application FastAPI.

Chaque exception du domaine est traduite en une réponse JSON avec un code
HTTP fixe et un marqueur qui permet au client de distinguer les cas.
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from haggle.exceptions import (
    ConflictException,
    DomainException,
    NotFoundException,
    UnauthorizedException,
    UploadFailedException,
    ValidationException,
)

logger = logging.getLogger(__name__)

ERROR_REQUEST_INVALID = "Requête invalide"


def status_for_exception(exc: DomainException) -> int:
    """Détermine le code HTTP correspondant à une exception du domaine."""
    if isinstance(exc, UnauthorizedException):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, NotFoundException):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (ValidationException, ConflictException, UploadFailedException)):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def body_for_exception(exc: DomainException) -> Dict[str, Any]:
    """Construit le corps JSON d'erreur pour une exception du domaine."""
    body: Dict[str, Any] = {"message": exc.message}
    if isinstance(exc, ValidationException):
        body["errors"] = exc.errors
    elif isinstance(exc, ConflictException):
        body["duplicate"] = True
    elif isinstance(exc, UnauthorizedException):
        body["authorized"] = False
    elif isinstance(exc, NotFoundException):
        body["notFound"] = True
    elif isinstance(exc, UploadFailedException):
        body["uploadFailed"] = True
    return body


def format_validation_errors(errors: Any) -> Dict[str, str]:
    """Convertit les erreurs pydantic en dictionnaire champ -> message."""
    formatted: Dict[str, str] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "form")]
        field = ".".join(location) or "__root__"
        formatted.setdefault(field, error.get("msg", "invalide"))
    return formatted


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = status_for_exception(exc)
    if status_code >= 500:
        logger.error("[Handler] Erreur non gérée sur %s: %s", request.url.path, exc.message)
    else:
        logger.info("[Handler] %s sur %s -> %s", type(exc).__name__, request.url.path, status_code)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=body_for_exception(exc), headers=headers)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Les erreurs de corps de requête sont des 400, comme les autres erreurs de validation."""
    logger.info("[Handler] Requête invalide sur %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            {"message": ERROR_REQUEST_INVALID, "errors": format_validation_errors(exc.errors())}
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
