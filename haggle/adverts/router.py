"""
Module définissant les routes API FastAPI pour les annonces.

Contient les endpoints pour:
- GET /adverts : Liste de toutes les annonces
- GET /adverts/{advert_id} : Détail d'une annonce
- POST /adverts : Publication d'une annonce (multipart, image requise)
- GET /users/current/adverts : Annonces du vendeur connecté
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, Header, UploadFile, status
from fastapi.responses import JSONResponse

from haggle.adverts.constants import ADVERT_ID_MAX, ADVERT_ID_MIN, MESSAGE_ADVERT_CREATED
from haggle.adverts.dependencies import AdvertServiceDep, PublicationServiceDep
from haggle.adverts.exceptions import InvalidAdvertIdException
from haggle.adverts.schemas import AdvertPublished, AdvertRead, SellerAdverts
from haggle.auth.dependencies import CurrentUserDep, extract_access_token
from haggle.exception_handlers import body_for_exception, status_for_exception
from haggle.exceptions import DomainException, UnauthorizedException
from haggle.images.storage import ImageUpload
from haggle.users.dependencies import UserServiceDep

logger = logging.getLogger(__name__)

advert_router = APIRouter()
seller_router = APIRouter()


@advert_router.get("", response_model=List[AdvertRead])
async def list_adverts(advert_service: AdvertServiceDep):
    """Liste toutes les annonces, triées par ID."""
    return await advert_service.list_adverts()


def parse_advert_id(raw_id: str) -> int:
    """Convertit l'ID d'annonce de l'URL, dans les bornes d'une clé BIGINT."""
    # isdigit() accepte aussi des chiffres Unicode comme "²"
    if not (raw_id.isascii() and raw_id.isdigit()):
        raise InvalidAdvertIdException(raw_id)
    advert_id = int(raw_id)
    if not ADVERT_ID_MIN <= advert_id <= ADVERT_ID_MAX:
        raise InvalidAdvertIdException(raw_id)
    return advert_id


@advert_router.get("/{advert_id}", response_model=AdvertRead)
async def get_advert(advert_id: str, advert_service: AdvertServiceDep):
    # L'ID est validé ici pour renvoyer 400 (et non 422) s'il est mal formé
    return await advert_service.get_advert(parse_advert_id(advert_id))


@advert_router.post("", response_model=AdvertPublished, status_code=status.HTTP_201_CREATED)
async def publish_advert(
    publication_service: PublicationServiceDep,
    authorization: Optional[str] = Header(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    currency: Optional[str] = Form(None),
    condition: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    delivery: Optional[List[str]] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    """
    Publie une annonce pour l'utilisateur porteur du token.

    Les champs sont validés par le service de publication, pas par FastAPI,
    afin que toute erreur après l'authentification porte ``created: false``.
    """
    fields = {
        "title": title,
        "description": description,
        "price": price,
        "currency": currency,
        "condition": condition,
        "category": category,
        "delivery": delivery,
    }
    upload = None
    if image is not None:
        upload = ImageUpload(
            content=await image.read(),
            filename=image.filename,
            content_type=image.content_type,
        )

    try:
        result = await publication_service.publish(extract_access_token(authorization), fields, upload)
    except UnauthorizedException:
        raise
    except DomainException as e:
        logger.info("[Router] Publication refusée: %s", e.message)
        body = body_for_exception(e)
        body["created"] = False
        return JSONResponse(status_code=status_for_exception(e), content=body)

    return AdvertPublished(message=MESSAGE_ADVERT_CREATED, ad_id=result.advert_id, linked=result.linked)


@seller_router.get("/current/adverts", response_model=SellerAdverts)
async def read_current_user_adverts(
    current_user: CurrentUserDep,
    advert_service: AdvertServiceDep,
    user_service: UserServiceDep,
):
    """Annonces de l'utilisateur connecté ; l'index du vendeur est réparé au passage."""
    logger.info("[Router] Annonces du vendeur ID: %s", current_user.id)
    return await advert_service.get_seller_adverts(current_user.id, user_service)
