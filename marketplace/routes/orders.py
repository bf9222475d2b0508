from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from marketplace.services.errors import Forbidden
from marketplace.services.order_service import (
    checkout,
    list_active_orders_for_buyer,
    list_deliveries_for_seller,
    verify_delivery,
)
from marketplace.validation import json_object, parse_uuid

order_bp = Blueprint('orders', __name__)


@order_bp.route('/checkout', methods=['POST'])
def checkout_route():
    """
    Check out products and create an order
    ---
    tags:
      - Orders
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - buyer_id
            - product_ids
          properties:
            buyer_id:
              type: string
            product_ids:
              type: array
              items:
                type: string
    responses:
      201:
        description: Order created, every product marked sold, cart cleared
      400:
        description: Invalid checkout parameters
      404:
        description: Buyer or product not found
      409:
        description: A product is no longer available
      500:
        description: Store failure
    """
    data = json_object(request.get_json(silent=True))
    order = checkout(data.get('buyer_id'), data.get('product_ids'))
    return jsonify(order.to_dict()), 201


@order_bp.route('/verify-otp', methods=['POST'])
def verify_otp_route():
    """
    Verify the handoff code for a sold product
    ---
    tags:
      - Orders
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - product_id
            - otp
          properties:
            product_id:
              type: string
            otp:
              type: string
    responses:
      200:
        description: OTP verified and delivery completed
      400:
        description: Invalid OTP, or no order for this product
      409:
        description: Delivery already completed
    """
    data = json_object(request.get_json(silent=True))
    if not verify_delivery(data.get('product_id'), data.get('otp')):
        return jsonify({'error': 'Invalid OTP', 'error_code': 'INVALID_OTP'}), 400
    return jsonify({'message': 'OTP verified and order completed'}), 200


@order_bp.route('/deliveries/<seller_id>', methods=['GET'])
def deliveries_route(seller_id):
    """
    Pending deliveries a seller has to hand over
    ---
    tags:
      - Orders
    parameters:
      - in: path
        name: seller_id
        required: true
        type: string
    responses:
      200:
        description: Pending order lines with product and buyer details
      400:
        description: Invalid seller id
    """
    return jsonify(list_deliveries_for_seller(seller_id)), 200


@order_bp.route('/active-orders/<buyer_id>', methods=['GET'])
@jwt_required()
def active_orders_route(buyer_id):
    """
    Active orders a buyer is waiting to receive
    Each call issues a new OTP per line; earlier codes stop working.
    ---
    tags:
      - Orders
    parameters:
      - in: path
        name: buyer_id
        required: true
        type: string
    security:
      - Bearer: []
    responses:
      200:
        description: Pending order lines with a fresh OTP and seller details
      400:
        description: Invalid buyer id
      401:
        description: Missing or invalid token
      403:
        description: Token does not belong to this buyer
    """
    # Codes go to the buyer only; the seller must get them in person.
    if str(parse_uuid(buyer_id, 'buyer_id')) != get_jwt_identity():
        raise Forbidden("Active orders are only visible to the buyer")
    return jsonify(list_active_orders_for_buyer(buyer_id)), 200
