import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.exceptions import NotFoundError
from storefront.models.bundle import Bundle
from storefront.schemas.bundle_schemas import BundleCreate
from storefront.services.bundle_service import bundle_detail, save_bundle

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_bundle(session: Session, bundle_id: int) -> Bundle:
    bundle = session.get(Bundle, bundle_id)
    if not bundle:
        raise NotFoundError("Bundle not found")
    return bundle


@router.get("/")
def list_bundles(
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    bundles = session.exec(select(Bundle).order_by(Bundle.sort_order, Bundle.id)).all()
    return [bundle_detail(b) for b in bundles]


@router.post("/")
def create_bundle(
    payload: BundleCreate,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    return bundle_detail(save_bundle(session, payload))


@router.get("/{bundle_id}")
def get_bundle(
    bundle_id: int,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    return bundle_detail(_get_bundle(session, bundle_id))


@router.put("/{bundle_id}")
def update_bundle(
    bundle_id: int,
    payload: BundleCreate,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    return bundle_detail(save_bundle(session, payload, _get_bundle(session, bundle_id)))


@router.delete("/{bundle_id}")
def delete_bundle(
    bundle_id: int,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    bundle = _get_bundle(session, bundle_id)
    session.delete(bundle)
    session.commit()
    logger.info(f"Admin {admin.id} deleted bundle {bundle_id}")
    return {"message": "Bundle deleted successfully"}
