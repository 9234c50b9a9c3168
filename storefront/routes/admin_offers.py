import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.dependencies.services import get_offer_repository
from storefront.exceptions import NotFoundError
from storefront.models.category import Category
from storefront.models.offer import Offer
from storefront.models.product import Product
from storefront.repositories.offers import OfferRepository
from storefront.schemas.offer_schemas import OfferCreate, OfferUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_scope(session: Session, payload):
    if payload.product_id is not None and not session.get(Product, payload.product_id):
        raise NotFoundError("Product not found")
    if payload.category_id is not None and not session.get(Category, payload.category_id):
        raise NotFoundError("Category not found")


@router.get("/")
def list_offers(
    offer_repo: OfferRepository = Depends(get_offer_repository),
    admin=Depends(require_admin),
):
    return offer_repo.list_all()


@router.post("/")
def create_offer(
    payload: OfferCreate,
    session: Session = Depends(get_session),
    offer_repo: OfferRepository = Depends(get_offer_repository),
    admin=Depends(require_admin),
):
    _check_scope(session, payload)
    offer = offer_repo.save(Offer(**payload.model_dump()))
    logger.info(f"Admin {admin.id} created offer {offer.id} ({offer.type.value})")
    return offer


@router.get("/{offer_id}")
def get_offer(
    offer_id: int,
    offer_repo: OfferRepository = Depends(get_offer_repository),
    admin=Depends(require_admin),
):
    offer = offer_repo.get(offer_id)
    if not offer:
        raise NotFoundError("Offer not found")
    return offer


@router.put("/{offer_id}")
def update_offer(
    offer_id: int,
    payload: OfferUpdate,
    session: Session = Depends(get_session),
    offer_repo: OfferRepository = Depends(get_offer_repository),
    admin=Depends(require_admin),
):
    offer = offer_repo.get(offer_id)
    if not offer:
        raise NotFoundError("Offer not found")
    _check_scope(session, payload)

    for field, value in payload.model_dump().items():
        setattr(offer, field, value)
    offer.updated_at = datetime.utcnow()

    offer = offer_repo.save(offer)
    logger.info(f"Admin {admin.id} updated offer {offer.id}")
    return offer


@router.delete("/{offer_id}")
def delete_offer(
    offer_id: int,
    offer_repo: OfferRepository = Depends(get_offer_repository),
    admin=Depends(require_admin),
):
    offer = offer_repo.get(offer_id)
    if not offer:
        raise NotFoundError("Offer not found")
    offer_repo.delete(offer)
    logger.info(f"Admin {admin.id} deleted offer {offer_id}")
    return {"message": "Offer deleted successfully"}
