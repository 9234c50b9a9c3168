from storefront.models.user import User
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.offer import Offer, OfferType
from storefront.models.coupon import Coupon
from storefront.models.order_item import OrderItem
from storefront.models.order import Order, OrderStatus, PaymentStatus, PaymentMethod
from storefront.models.payment import Payment
from storefront.models.store_setting import StoreSetting
from storefront.models.bundle import Bundle, BundleItem

# add ALL models here
