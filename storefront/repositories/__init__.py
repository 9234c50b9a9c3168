from storefront.repositories.offers import OfferRepository, CouponRepository
from storefront.repositories.orders import OrderRepository
from storefront.repositories.payments import PaymentRepository
from storefront.repositories.settings import SettingsRepository
