import hashlib
import hmac
import os
from unittest.mock import MagicMock

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URI", "sqlite://")
os.environ["ENV"] = "test"

import pytest
import razorpay
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.config import settings
from storefront.database import create_db_and_tables, get_session
from storefront.dependencies.services import get_gateway_factory
from storefront.main import app
from storefront.models import Category, Order, PaymentMethod, Product, User
from storefront.services.razorpay_gateway import RazorpayGateway
from storefront.utils.hash import hash_password
from storefront.utils.token import create_access_token

KEY_ID = "rzp_test_AbCdEfGh1234"
KEY_SECRET = "test_secret_key"


def sign(order_id, payment_id, secret=KEY_SECRET):
    return hmac.new(
        secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256
    ).hexdigest()


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'user_id': user.id})}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def razorpay_env(monkeypatch):
    monkeypatch.setattr(settings, "razorpay_key_id", KEY_ID)
    monkeypatch.setattr(settings, "razorpay_key_secret", KEY_SECRET)


@pytest.fixture
def no_razorpay_env(monkeypatch):
    monkeypatch.setattr(settings, "razorpay_key_id", None)
    monkeypatch.setattr(settings, "razorpay_key_secret", None)


@pytest.fixture
def order_api():
    api = MagicMock()
    api.create.side_effect = lambda data: {
        "id": "order_Test123",
        "entity": "order",
        "amount": data["amount"],
        "currency": data["currency"],
        "receipt": data["receipt"],
        "status": "created",
    }
    return api


@pytest.fixture
def payment_api():
    api = MagicMock()
    api.all.return_value = {"entity": "collection", "count": 0, "items": []}
    return api


@pytest.fixture
def gateway_factory(order_api, payment_api):
    """Real SDK client (real signature checks) with the HTTP resources mocked."""
    created = []

    def factory(credentials):
        client = razorpay.Client(auth=(credentials.key_id, credentials.key_secret))
        client.order = order_api
        client.payment = payment_api
        created.append(credentials)
        return RazorpayGateway(credentials, client=client)

    factory.created = created
    return factory


@pytest.fixture
def client(engine, gateway_factory):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_gateway_factory] = lambda: gateway_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


def _user(session, email, role="customer"):
    user = User(
        full_name=email.split("@")[0].title(),
        email=email,
        password=hash_password("s3cret-pass"),
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def customer(session):
    return _user(session, "asha@example.com")


@pytest.fixture
def other_customer(session):
    return _user(session, "ravi@example.com")


@pytest.fixture
def admin(session):
    return _user(session, "admin@example.com", role="admin")


@pytest.fixture
def category(session):
    category = Category(name="Shirts", slug="shirts")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture
def product(session, category):
    product = Product(name="Linen Shirt", slug="linen-shirt", price=1000, category_id=category.id, sku="LS-1")
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def make_order(session):
    def _make(user, total=500.0, number="ORD0001"):
        order = Order(
            order_number=number,
            user_id=user.id,
            payment_method=PaymentMethod.online,
            subtotal=total,
            total=total,
        )
        session.add(order)
        session.commit()
        session.refresh(order)
        return order
    return _make
