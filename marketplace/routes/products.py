from flask import Blueprint, jsonify, request
from marketplace.services import product_service
from marketplace.validation import json_object

product_bp = Blueprint('products', __name__)


@product_bp.route('', methods=['GET'])
def list_products():
    """
    List products that are still available
    ---
    tags:
      - Products
    parameters:
      - name: page
        in: query
        type: integer
        default: 1
      - name: per_page
        in: query
        type: integer
        default: 20
    responses:
      200:
        description: List of available products
    """
    page = max(request.args.get('page', 1, type=int), 1)
    per_page = min(max(request.args.get('per_page', 20, type=int), 1), 100)

    result = product_service.list_available_products(page, per_page)
    return jsonify({
        "success": True,
        "data": result['data'],
        "pagination": result['pagination']
    }), 200


@product_bp.route('/<product_id>', methods=['GET'])
def get_product(product_id):
    """
    Get a single product
    ---
    tags:
      - Products
    parameters:
      - name: product_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Product details
      400:
        description: Invalid product id
      404:
        description: Product not found
    """
    product = product_service.get_product(product_id)
    return jsonify(product.to_dict()), 200


@product_bp.route('/user/<user_id>', methods=['GET'])
def list_user_products(user_id):
    """
    Products a user has listed, sold and ordered
    ---
    tags:
      - Products
    parameters:
      - name: user_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: listed_products, sold_items and ordered_items
    """
    return jsonify(product_service.list_user_products(user_id)), 200


@product_bp.route('', methods=['POST'])
def create_product():
    """
    List a new product for sale
    ---
    tags:
      - Products
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
            - description
            - price
            - category
            - seller_id
          properties:
            name:
              type: string
            description:
              type: string
            price:
              type: number
            category:
              type: string
            seller_id:
              type: string
            images:
              type: array
              items:
                type: object
                properties:
                  url:
                    type: string
                  alt:
                    type: string
    responses:
      201:
        description: Product created
      400:
        description: Invalid input
      404:
        description: Seller not found
    """
    data = json_object(request.get_json(silent=True))
    product = product_service.create_product(data)
    return jsonify(product.to_dict()), 201


@product_bp.route('/<product_id>', methods=['PUT'])
def update_product(product_id):
    """
    Edit a product
    ---
    tags:
      - Products
    parameters:
      - name: product_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name:
              type: string
            description:
              type: string
            price:
              type: number
            category:
              type: string
            images:
              type: array
              items:
                type: object
    responses:
      200:
        description: Updated product
      400:
        description: Invalid input
      404:
        description: Product not found
    """
    data = json_object(request.get_json(silent=True))
    product = product_service.update_product(product_id, data)
    return jsonify(product.to_dict()), 200


@product_bp.route('/<product_id>', methods=['DELETE'])
def delete_product(product_id):
    """
    Delete a product
    ---
    tags:
      - Products
    parameters:
      - name: product_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Product deleted
      404:
        description: Product not found
      409:
        description: Product already sold
    """
    product = product_service.delete_product(product_id)
    return jsonify({'message': 'Product deleted successfully', 'product': product}), 200
