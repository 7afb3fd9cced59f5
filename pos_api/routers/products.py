# pos_api/routers/products.py

from datetime import date, datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.models.categories import Category
from pos_api.models.products import Product
from pos_api.schemas.product import (
    CategoryResponse,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

router = APIRouter(
    prefix="/api",
    tags=["Products"],
    dependencies=[Depends(get_current_user)],
)


def _get_product_or_404(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


def _check_category(db: Session, category_id: str | None):
    if category_id and db.get(Category, category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Category {category_id} does not exist",
        )


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.name).all()


@router.get("/products", response_model=list[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    return db.query(Product).order_by(Product.name).all()


@router.get("/products/expiring", response_model=list[ProductResponse])
def list_expiring_products(
    days: int = Query(7, ge=0, le=3650),
    db: Session = Depends(get_db),
):
    threshold: date = datetime.now(timezone.utc).date() + timedelta(days=days)

    return (
        db.query(Product)
        .filter(
            Product.expiration_date.isnot(None),
            Product.expiration_date <= threshold,
        )
        .order_by(Product.expiration_date)
        .all()
    )


@router.get("/products/sku/{sku}", response_model=ProductResponse)
def get_product_by_sku(sku: str, db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.sku == sku).first()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return _get_product_or_404(db, product_id)


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
):
    # SKUs are unique across the catalog
    if db.query(Product).filter(Product.sku == product_data.sku).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product with this SKU already exists",
        )

    _check_category(db, product_data.category_id)

    product = Product(**product_data.model_dump())

    try:
        db.add(product)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Product with this SKU already exists")

    db.refresh(product)
    return product


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
):
    product = _get_product_or_404(db, product_id)

    updates = product_data.model_dump(exclude_unset=True)

    if "sku" in updates and updates["sku"] != product.sku:
        if db.query(Product).filter(Product.sku == updates["sku"]).first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product with this SKU already exists",
            )

    if "category_id" in updates:
        _check_category(db, updates["category_id"])

    for field, value in updates.items():
        setattr(product, field, value)

    db.commit()
    db.refresh(product)

    return product


@router.delete("/products/{product_id}")
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
):
    product = _get_product_or_404(db, product_id)

    try:
        db.delete(product)
        db.commit()
    except IntegrityError:
        # Sold products stay referenced by their transaction items
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product has sales history; deactivate it instead",
        )

    return {"message": "Product deleted successfully"}
