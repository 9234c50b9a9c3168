from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from storefront.models.coupon import Coupon
from storefront.models.offer import Offer


def _in_window(model, now: datetime):
    return (
        or_(model.start_date.is_(None), model.start_date <= now),
        or_(model.end_date.is_(None), model.end_date >= now),
    )


class OfferRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_active(self, now: Optional[datetime] = None) -> List[Offer]:
        """Offers that are switched on and whose date window contains ``now``."""
        now = now or datetime.utcnow()
        return self.session.exec(
            select(Offer)
            .where(Offer.is_active == True)  # noqa: E712
            .where(*_in_window(Offer, now))
            .order_by(Offer.id)
        ).all()

    def list_all(self) -> List[Offer]:
        return self.session.exec(select(Offer).order_by(Offer.id)).all()

    def get(self, offer_id: int) -> Optional[Offer]:
        return self.session.get(Offer, offer_id)

    def save(self, offer: Offer) -> Offer:
        self.session.add(offer)
        self.session.commit()
        self.session.refresh(offer)
        return offer

    def delete(self, offer: Offer):
        self.session.delete(offer)
        self.session.commit()


class CouponRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_active_by_code(self, code: str, now: Optional[datetime] = None) -> Optional[Coupon]:
        now = now or datetime.utcnow()
        return self.session.exec(
            select(Coupon)
            .where(Coupon.code == code.strip().upper())
            .where(Coupon.is_active == True)  # noqa: E712
            .where(*_in_window(Coupon, now))
        ).first()

    def get_by_code(self, code: str) -> Optional[Coupon]:
        return self.session.exec(
            select(Coupon).where(Coupon.code == code.strip().upper())
        ).first()

    def list_all(self) -> List[Coupon]:
        return self.session.exec(select(Coupon).order_by(Coupon.id)).all()

    def get(self, coupon_id: int) -> Optional[Coupon]:
        return self.session.get(Coupon, coupon_id)

    def save(self, coupon: Coupon) -> Coupon:
        self.session.add(coupon)
        self.session.commit()
        self.session.refresh(coupon)
        return coupon

    def delete(self, coupon: Coupon):
        self.session.delete(coupon)
        self.session.commit()
