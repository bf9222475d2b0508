"""
User Service
Accounts, profiles, carts and seller reviews.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from marketplace.extensions import db
from marketplace.models.product import Product, PRODUCT_AVAILABLE
from marketplace.models.user import User, CartItem, SellerReview
from marketplace.services.errors import (
    AuthenticationFailed,
    Conflict,
    NotFound,
    StoreError,
    ValidationError,
)
from marketplace.validation import (
    parse_uuid,
    require_fields,
    require_str,
    validate_age,
    validate_contact_number,
    validate_email,
    validate_password,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ["first_name", "last_name", "email", "age", "contact_number"]
STRING_FIELDS = ["first_name", "last_name", "email"]


def _commit(message):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("%s: %s", message, e)
        raise StoreError(message) from e


def get_user(user_id):
    user = db.session.get(User, parse_uuid(user_id, "user_id"))
    if user is None:
        raise NotFound("User not found", error_code="USER_NOT_FOUND")
    return user


def find_by_email(email):
    return User.query.filter_by(email=email).first()


def register(data):
    require_fields(data, PROFILE_FIELDS + ["password"])
    require_str(data, STRING_FIELDS + ["password", "profile_image"])
    validate_email(data["email"])
    validate_age(data["age"])
    validate_contact_number(data["contact_number"])
    validate_password(data["password"])

    if find_by_email(data["email"]):
        raise Conflict("Email is already registered", error_code="EMAIL_EXISTS")

    user = User(
        first_name=data["first_name"].strip(),
        last_name=data["last_name"].strip(),
        email=data["email"].strip(),
        age=data["age"],
        contact_number=str(data["contact_number"]),
    )
    if data.get("profile_image"):
        user.profile_image = data["profile_image"]
    user.set_password(data["password"])

    db.session.add(user)
    _commit("Failed to register user")
    logger.info("User %s registered", user.user_id)
    return user


def authenticate(email, password):
    if not email or not password:
        raise ValidationError("Email and password are required")
    user = find_by_email(email)
    if user is None:
        raise NotFound("User not found", error_code="USER_NOT_FOUND")
    if not user.check_password(password):
        raise AuthenticationFailed("Invalid email or password")
    return user


def update_profile(user_id, data):
    require_fields(data, PROFILE_FIELDS + ["profile_image"])
    require_str(data, STRING_FIELDS + ["profile_image"])
    validate_email(data["email"])
    validate_age(data["age"])
    validate_contact_number(data["contact_number"])

    user = get_user(user_id)
    other = find_by_email(data["email"])
    if other is not None and other.user_id != user.user_id:
        raise Conflict("Email is already registered", error_code="EMAIL_EXISTS")

    user.first_name = data["first_name"].strip()
    user.last_name = data["last_name"].strip()
    user.email = data["email"].strip()
    user.age = data["age"]
    user.contact_number = str(data["contact_number"])
    user.profile_image = data["profile_image"]
    _commit("Failed to update user")
    return user


# --- Reviews ----------------------------------------------------------------

def add_review(seller_id, data):
    rating = data.get("rating")
    if data.get("reviewer_id") in (None, "") or rating is None or not data.get("review"):
        raise ValidationError("Invalid request body. Missing fields.")
    require_str(data, ["review"])
    if isinstance(rating, bool) or not isinstance(rating, int) or not 0 <= rating <= 5:
        raise ValidationError("rating must be a whole number between 0 and 5")

    seller = get_user(seller_id)
    reviewer = get_user(data["reviewer_id"])
    if reviewer.user_id == seller.user_id:
        raise ValidationError("Users cannot review themselves")

    seller.seller_reviews.append(SellerReview(
        reviewer_id=reviewer.user_id,
        rating=rating,
        review=data["review"].strip(),
    ))
    _commit("Failed to add review")
    return seller.seller_reviews


# --- Cart -------------------------------------------------------------------

def _parse_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("quantity must be a positive integer")
    return quantity


def add_to_cart(user_id, product_id, quantity=None):
    user = get_user(user_id)
    product_id = parse_uuid(product_id, "product_id")
    quantity = _parse_quantity(1 if quantity is None else quantity)

    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found", error_code="PRODUCT_NOT_FOUND")
    if product.trading_status != PRODUCT_AVAILABLE:
        raise Conflict("Product is no longer available", error_code="PRODUCT_UNAVAILABLE")

    item = next((i for i in user.cart_items if i.product_id == product_id), None)
    if item is not None:
        item.quantity += quantity
    else:
        user.cart_items.append(CartItem(product_id=product_id, quantity=quantity))

    _commit("Failed to update cart")
    return user


def update_cart_quantity(user_id, product_id, quantity):
    user = get_user(user_id)
    product_id = parse_uuid(product_id, "product_id")
    quantity = _parse_quantity(quantity)

    item = next((i for i in user.cart_items if i.product_id == product_id), None)
    if item is None:
        raise NotFound("Product not found in cart", error_code="CART_ITEM_NOT_FOUND")
    item.quantity = quantity
    _commit("Failed to update cart")
    return user


def remove_from_cart(user_id, product_id):
    user = get_user(user_id)
    product_id = parse_uuid(product_id, "product_id")
    user.cart_items = [i for i in user.cart_items if i.product_id != product_id]
    _commit("Failed to update cart")
    return user
