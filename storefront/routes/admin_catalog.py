from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.exceptions import NotFoundError, ValidationError
from storefront.models.category import Category
from storefront.models.offer import Offer
from storefront.models.product import Product
from storefront.schemas.catalog_schemas import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
)
from storefront.services.catalog_service import unique_slug
from storefront.utils.pagination import paginate

router = APIRouter()


# -------- Categories --------

@router.post("/categories")
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    existing = session.exec(select(Category).where(Category.name == payload.name)).first()
    if existing:
        raise ValidationError("Category already exists")

    category = Category(
        **payload.model_dump(),
        slug=unique_slug(session, Category, payload.name),
    )
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@router.get("/categories")
def list_categories(
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    return session.exec(select(Category).order_by(Category.sort_order, Category.id)).all()


@router.put("/categories/{category_id}")
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    category = session.get(Category, category_id)
    if not category:
        raise NotFoundError("Category not found")

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("name") and updates["name"] != category.name:
        category.slug = unique_slug(session, Category, updates["name"], exclude_id=category.id)
    for field, value in updates.items():
        setattr(category, field, value)
    category.updated_at = datetime.utcnow()

    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    category = session.get(Category, category_id)
    if not category:
        raise NotFoundError("Category not found")

    # products (archived ones included) and offers keep their foreign key
    in_use = session.exec(
        select(Product.id).where(Product.category_id == category_id).limit(1)
    ).first() or session.exec(
        select(Offer.id).where(Offer.category_id == category_id).limit(1)
    ).first()
    if in_use:
        raise ValidationError("Category still has products or offers; deactivate it instead")

    session.delete(category)
    session.commit()
    return {"message": "Category deleted"}


# -------- Products --------

@router.post("/products")
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    if payload.category_id is not None and not session.get(Category, payload.category_id):
        raise NotFoundError("Category not found")

    product = Product(
        **payload.model_dump(),
        slug=unique_slug(session, Product, payload.name),
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@router.get("/products")
def list_products(
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    return paginate(session=session, query=select(Product).order_by(Product.id), page=page, limit=limit)


@router.put("/products/{product_id}")
def update_product(
    product_id: int,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("category_id") is not None and not session.get(Category, updates["category_id"]):
        raise NotFoundError("Category not found")
    if updates.get("name") and updates["name"] != product.name:
        product.slug = unique_slug(session, Product, updates["name"], exclude_id=product.id)
    for field, value in updates.items():
        setattr(product, field, value)
    product.updated_at = datetime.utcnow()

    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@router.delete("/products/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    admin=Depends(require_admin),
):
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")

    # soft delete keeps order history and offers pointing somewhere
    product.is_active = False
    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()
    return {"message": "Product archived"}
