"""
Product Service
Listing, lookup and seller edits. The sold transition itself belongs to
checkout (order_service).
"""

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy.exc import SQLAlchemyError

from marketplace.extensions import db
from marketplace.models.order import Order, OrderLine
from marketplace.models.product import Product, PRODUCT_AVAILABLE, PRODUCT_SOLD
from marketplace.models.user import User, CartItem
from marketplace.services.errors import Conflict, NotFound, StoreError, ValidationError
from marketplace.validation import parse_uuid, require_fields, require_str

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "price", "category", "images")


def _parse_price(value):
    if isinstance(value, bool):
        raise ValidationError("price must be a number")
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("price must be a number")
    if not price.is_finite() or price < 0:
        raise ValidationError("price must be a non-negative number")
    return price


def _parse_images(value):
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError("images must be a list")
    images = []
    for image in value:
        if not isinstance(image, dict) or not image.get("url") or not image.get("alt"):
            raise ValidationError("each image needs a url and an alt")
        images.append({"url": image["url"], "alt": image["alt"]})
    return images


def get_product(product_id):
    product = db.session.get(Product, parse_uuid(product_id, "product_id"))
    if product is None:
        raise NotFound("Product not found", error_code="PRODUCT_NOT_FOUND")
    return product


def list_available_products(page=1, per_page=20):
    pagination = (
        Product.query
        .filter_by(trading_status=PRODUCT_AVAILABLE)
        .order_by(Product.created_at.desc())
        .paginate(page=page, per_page=per_page, error_out=False)
    )
    return {
        "data": [p.to_dict() for p in pagination.items],
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": pagination.total,
            "total_pages": pagination.pages,
        },
    }


def list_user_products(user_id):
    """Products a user has listed, sold, and ordered."""
    user_id = parse_uuid(user_id, "user_id")
    products = Product.query.filter_by(seller_id=user_id).order_by(Product.created_at.desc()).all()
    ordered = (
        Product.query
        .join(OrderLine, OrderLine.product_id == Product.product_id)
        .join(Order, Order.order_id == OrderLine.order_id)
        .filter(Order.buyer_id == user_id)
        .order_by(Order.created_at.desc(), OrderLine.position.asc())
        .all()
    )
    return {
        "listed_products": [p.to_dict() for p in products if p.trading_status == PRODUCT_AVAILABLE],
        "sold_items": [p.to_dict() for p in products if p.trading_status == PRODUCT_SOLD],
        "ordered_items": [p.to_dict() for p in ordered],
    }


def create_product(data):
    require_fields(data, ["name", "description", "price", "category", "seller_id"])
    require_str(data, ["name", "description", "category"])
    seller = db.session.get(User, parse_uuid(data["seller_id"], "seller_id"))
    if seller is None:
        raise NotFound("Seller not found", error_code="USER_NOT_FOUND")

    product = Product(
        name=data["name"],
        description=data["description"],
        price=_parse_price(data["price"]),
        category=data["category"],
        seller_id=seller.user_id,
        seller_image=seller.profile_image,
        images=_parse_images(data.get("images")),
        trading_status=PRODUCT_AVAILABLE,
    )
    try:
        db.session.add(product)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to create product") from e

    logger.info("Product %s listed by seller %s", product.product_id, seller.user_id)
    return product


def update_product(product_id, data):
    product = get_product(product_id)
    changes = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    require_str(changes, ["name", "description", "category"])
    if not changes:
        raise ValidationError(f"Nothing to update; editable fields: {', '.join(EDITABLE_FIELDS)}")

    for field in ("name", "description", "category"):
        if field in changes:
            if not changes[field]:
                raise ValidationError(f"{field} must not be empty")
            setattr(product, field, changes[field])
    if "price" in changes:
        product.price = _parse_price(changes["price"])
    if "images" in changes:
        product.images = _parse_images(changes["images"])

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to update product") from e
    return product


def delete_product(product_id):
    product = get_product(product_id)
    if product.trading_status == PRODUCT_SOLD:
        raise Conflict("Sold products cannot be deleted", error_code="PRODUCT_SOLD")

    data = product.to_dict()
    try:
        CartItem.query.filter_by(product_id=product.product_id).delete()
        db.session.delete(product)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Failed to delete product") from e

    logger.info("Product %s deleted", data["product_id"])
    return data
