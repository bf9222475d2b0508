from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from marketplace.services import user_service
from marketplace.validation import json_object

user_bp = Blueprint('users', __name__)


@user_bp.route('/profile', methods=['GET'])
@jwt_required()
def get_own_profile():
    """
    Get the logged-in user's profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: User profile with cart and reviews
      404:
        description: User not found
    """
    user = user_service.get_user(get_jwt_identity())
    return jsonify({'message': 'User profile retrieved successfully', 'user': user.to_dict()}), 200


@user_bp.route('/profile/<user_id>', methods=['GET'])
@jwt_required()
def get_user_profile(user_id):
    """
    Get another user's public profile
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: user_id
        required: true
        type: string
    security:
      - Bearer: []
    responses:
      200:
        description: Public profile and seller reviews
      404:
        description: User not found
    """
    user = user_service.get_user(user_id)
    data = user.to_public_dict()
    data['seller_reviews'] = [r.to_dict() for r in user.seller_reviews]
    return jsonify({'message': 'User profile retrieved successfully', 'user': data}), 200


@user_bp.route('/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    """
    Update the logged-in user's profile
    ---
    tags:
      - Users
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - first_name
            - last_name
            - email
            - age
            - contact_number
            - profile_image
    security:
      - Bearer: []
    responses:
      200:
        description: User info updated
      400:
        description: Missing or invalid fields
      409:
        description: Email taken by another user
    """
    data = json_object(request.get_json(silent=True))
    user = user_service.update_profile(get_jwt_identity(), data)
    return jsonify({'message': 'User info updated successfully', 'user': user.to_public_dict()}), 200


@user_bp.route('/reviews/<user_id>', methods=['GET'])
def get_reviews(user_id):
    """
    Get seller reviews
    ---
    tags:
      - Reviews
    parameters:
      - in: path
        name: user_id
        required: true
        type: string
    responses:
      200:
        description: Seller reviews
      404:
        description: User not found
    """
    user = user_service.get_user(user_id)
    return jsonify([r.to_dict() for r in user.seller_reviews]), 200


@user_bp.route('/reviews/<user_id>', methods=['POST'])
def add_review(user_id):
    """
    Review a seller
    ---
    tags:
      - Reviews
    parameters:
      - in: path
        name: user_id
        required: true
        type: string
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - rating
            - review
            - reviewer_id
          properties:
            rating:
              type: integer
            review:
              type: string
            reviewer_id:
              type: string
    responses:
      200:
        description: Review added
      400:
        description: Missing fields or rating out of range
      404:
        description: Seller or reviewer not found
    """
    data = json_object(request.get_json(silent=True))
    reviews = user_service.add_review(user_id, data)
    return jsonify({
        'message': 'Review added successfully',
        'seller_reviews': [r.to_dict() for r in reviews]
    }), 200


# --- Cart -------------------------------------------------------------------
# Cart endpoints answer with the refreshed profile, which embeds the cart.

def _profile_response(user):
    return jsonify({'success': True, 'user': user.to_dict()}), 200


@user_bp.route('/cart', methods=['GET'])
@jwt_required()
def get_cart():
    """
    Get the logged-in user's cart
    ---
    tags:
      - Cart
    security:
      - Bearer: []
    responses:
      200:
        description: Profile including cart items
    """
    return _profile_response(user_service.get_user(get_jwt_identity()))


@user_bp.route('/cart/add', methods=['POST'])
@jwt_required()
def add_to_cart():
    """
    Add a product to the cart
    ---
    tags:
      - Cart
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - product_id
          properties:
            product_id:
              type: string
            quantity:
              type: integer
    security:
      - Bearer: []
    responses:
      200:
        description: Updated profile including cart items
      404:
        description: Product not found
      409:
        description: Product already sold
    """
    data = json_object(request.get_json(silent=True))
    user = user_service.add_to_cart(get_jwt_identity(), data.get('product_id'), data.get('quantity'))
    return _profile_response(user)


@user_bp.route('/cart/update-quantity', methods=['PUT'])
@jwt_required()
def update_cart_quantity():
    """
    Change the quantity of a cart item
    ---
    tags:
      - Cart
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - product_id
            - quantity
          properties:
            product_id:
              type: string
            quantity:
              type: integer
    security:
      - Bearer: []
    responses:
      200:
        description: Updated profile including cart items
      404:
        description: Product not in cart
    """
    data = json_object(request.get_json(silent=True))
    user = user_service.update_cart_quantity(get_jwt_identity(), data.get('product_id'), data.get('quantity'))
    return _profile_response(user)


@user_bp.route('/cart/remove/<product_id>', methods=['DELETE'])
@jwt_required()
def remove_from_cart(product_id):
    """
    Remove a product from the cart
    ---
    tags:
      - Cart
    parameters:
      - in: path
        name: product_id
        required: true
        type: string
    security:
      - Bearer: []
    responses:
      200:
        description: Updated profile including cart items
    """
    user = user_service.remove_from_cart(get_jwt_identity(), product_id)
    return _profile_response(user)
