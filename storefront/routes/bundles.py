from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from storefront.database import get_session
from storefront.models.bundle import Bundle
from storefront.services.bundle_service import bundle_detail

router = APIRouter()


@router.get("")
def list_active_bundles(limit: int = 6, session: Session = Depends(get_session)):
    bundles = session.exec(
        select(Bundle)
        .where(Bundle.is_active == True)  # noqa: E712
        .order_by(Bundle.sort_order, Bundle.id)
        .limit(min(max(limit, 1), 50))
    ).all()
    return [bundle_detail(b) for b in bundles]
