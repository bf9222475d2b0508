"""
Order Service
Checkout and the delivery handoff state machine.

Checkout:  each product available -> sold, one new order, buyer cart cleared.
Delivery:  each line in process -> completed once the buyer's code is shown
           to the seller and verified.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from marketplace.extensions import db
from marketplace.models.order import Order, OrderLine, LINE_IN_PROCESS, LINE_COMPLETED
from marketplace.models.product import Product, PRODUCT_AVAILABLE, PRODUCT_SOLD
from marketplace.models.user import User, CartItem
from marketplace.services import otp
from marketplace.services.errors import (
    CheckoutFailed,
    DeliveryAlreadyCompleted,
    LineNotFound,
    NotFound,
    OrderNotFound,
    StoreError,
    ValidationError,
)
from marketplace.validation import parse_uuid

logger = logging.getLogger(__name__)


def checkout(buyer_id, product_ids):
    """
    Reserve every product for the buyer and create a single order.

    Status flips, the order insert and the cart clear share one transaction:
    if any product is missing or already sold nothing is committed.
    The initial codes are never disclosed; the buyer gets a rotated code
    from list_active_orders_for_buyer.
    """
    buyer_id = parse_uuid(buyer_id, "buyer_id")
    if not isinstance(product_ids, list) or not product_ids:
        raise ValidationError("product_ids must be a non-empty list")
    product_ids = [parse_uuid(pid, "product_ids") for pid in product_ids]
    if len(set(product_ids)) != len(product_ids):
        raise ValidationError("product_ids must not contain duplicates")

    if db.session.get(User, buyer_id) is None:
        raise NotFound(f"Buyer not found: {buyer_id}", error_code="USER_NOT_FOUND")

    order = Order(buyer_id=buyer_id)
    try:
        for position, product_id in enumerate(product_ids):
            _reserve_product(product_id)
            _, digest = otp.issue_otp()
            order.lines.append(OrderLine(
                position=position,
                product_id=product_id,
                otp_digest=digest,
                status=LINE_IN_PROCESS,
            ))
        db.session.add(order)
        CartItem.query.filter_by(user_id=buyer_id).delete()
        db.session.commit()
    except CheckoutFailed as e:
        db.session.rollback()
        logger.warning("Checkout for buyer %s aborted: %s", buyer_id, e.message)
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Checkout for buyer %s failed in store: %s", buyer_id, e)
        raise StoreError("Failed to create order") from e

    logger.info("Order %s created for buyer %s with %d line(s)", order.order_id, buyer_id, len(product_ids))
    return order


def _reserve_product(product_id):
    # Compare-and-swap: only an available product can be sold.
    result = db.session.execute(
        db.update(Product)
        .where(Product.product_id == product_id, Product.trading_status == PRODUCT_AVAILABLE)
        .values(trading_status=PRODUCT_SOLD)
    )
    if result.rowcount == 1:
        return
    if db.session.get(Product, product_id) is None:
        raise CheckoutFailed(
            f"Product not found: {product_id}",
            product_id=product_id,
            error_code="PRODUCT_NOT_FOUND",
            status_code=404,
        )
    raise CheckoutFailed(
        f"Product is no longer available: {product_id}",
        product_id=product_id,
        error_code="PRODUCT_UNAVAILABLE",
    )


def verify_delivery(product_id, presented_otp):
    """
    Complete the delivery of a product if the presented code matches.

    Returns True when the line moved to completed and False on a wrong code
    (nothing is changed). Repeated wrong codes are not throttled.
    Verifying a line that is already completed raises DeliveryAlreadyCompleted.
    """
    product_id = parse_uuid(product_id, "product_id")
    if presented_otp is None or str(presented_otp).strip() == "":
        raise ValidationError("Missing field: otp")
    presented_otp = str(presented_otp).strip()

    order = (
        Order.query
        .filter(Order.lines.any(OrderLine.product_id == product_id))
        .order_by(Order.created_at.asc())
        .first()
    )
    if order is None:
        raise OrderNotFound(f"No order found for product {product_id}")

    line = next((l for l in order.lines if l.product_id == product_id), None)
    if line is None:
        raise LineNotFound(f"Product {product_id} is not part of order {order.order_id}")

    if line.status == LINE_COMPLETED:
        raise DeliveryAlreadyCompleted(f"Delivery of product {product_id} is already completed")

    stored_digest = line.otp_digest
    if not otp.compare_otp(presented_otp, stored_digest):
        logger.info("Rejected delivery code for product %s", product_id)
        return False

    try:
        result = db.session.execute(
            db.update(OrderLine)
            .where(
                OrderLine.line_id == line.line_id,
                OrderLine.status == LINE_IN_PROCESS,
                OrderLine.otp_digest == stored_digest,
            )
            .values(status=LINE_COMPLETED, completed_at=datetime.now(timezone.utc))
        )
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Failed to complete delivery of product %s: %s", product_id, e)
        raise StoreError("Failed to verify OTP") from e

    if result.rowcount == 0:
        # Lost a race: the line was completed or its code rotated meanwhile.
        if line.status == LINE_COMPLETED:
            raise DeliveryAlreadyCompleted(f"Delivery of product {product_id} is already completed")
        return False

    logger.info("Delivery of product %s completed (order %s)", product_id, order.order_id)
    return True


def list_deliveries_for_seller(seller_id):
    """Pending handoffs the seller owes, with the buyer's public profile."""
    seller_id = parse_uuid(seller_id, "seller_id")
    lines = (
        OrderLine.query
        .join(OrderLine.product)
        .join(OrderLine.order)
        .filter(Product.seller_id == seller_id, OrderLine.status == LINE_IN_PROCESS)
        .order_by(Order.created_at.asc(), OrderLine.position.asc())
        .all()
    )
    deliveries = []
    for line in lines:
        view = line.to_dict()
        view["product"] = line.product.to_dict()
        view["buyer"] = line.order.buyer.to_public_dict()
        deliveries.append(view)
    return deliveries


def list_active_orders_for_buyer(buyer_id):
    """
    Pending lines the buyer is waiting to receive, each with a new raw code.

    Every call rotates the code of every returned line, so any code handed
    out earlier stops verifying.
    """
    buyer_id = parse_uuid(buyer_id, "buyer_id")
    lines = (
        OrderLine.query
        .join(OrderLine.order)
        .filter(Order.buyer_id == buyer_id, OrderLine.status == LINE_IN_PROCESS)
        .order_by(Order.created_at.asc(), OrderLine.position.asc())
        .all()
    )

    active = []
    try:
        for line in lines:
            raw_otp, digest = otp.issue_otp()
            result = db.session.execute(
                db.update(OrderLine)
                .where(OrderLine.line_id == line.line_id, OrderLine.status == LINE_IN_PROCESS)
                .values(otp_digest=digest)
            )
            if result.rowcount == 0:
                continue  # completed concurrently
            view = line.to_dict()
            view["otp"] = raw_otp
            view["product"] = line.product.to_dict()
            view["seller"] = line.product.seller.to_public_dict()
            active.append(view)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Failed to rotate delivery codes for buyer %s: %s", buyer_id, e)
        raise StoreError("Failed to fetch active orders") from e

    logger.info("Rotated %d delivery code(s) for buyer %s", len(active), buyer_id)
    return active
