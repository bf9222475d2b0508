import datetime

from flask import Blueprint, request, jsonify
from flask_jwt_extended import (
    create_access_token,
    get_jwt,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)
from marketplace.extensions import BLOCKLIST
from marketplace.services import user_service
from marketplace.validation import json_object

auth_bp = Blueprint('auth', __name__)

ACCESS_TOKEN_EXPIRES = datetime.timedelta(hours=1)


def _login_response(user, status_code):
    access_token = create_access_token(identity=str(user.user_id), expires_delta=ACCESS_TOKEN_EXPIRES)
    response = jsonify({
        'message': 'User profile retrieved successfully',
        'access_token': access_token,
        'user': user.to_dict()
    })
    set_access_cookies(response, access_token)
    return response, status_code


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """
    Register a new user
    ---
    tags:
      - Auth
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
            - password
          properties:
            first_name:
              type: string
            last_name:
              type: string
            email:
              type: string
            age:
              type: integer
            contact_number:
              type: string
            password:
              type: string
            profile_image:
              type: string
    responses:
      201:
        description: User registered and logged in
      400:
        description: Missing or invalid fields
      409:
        description: Email already registered
    """
    data = json_object(request.get_json(silent=True))
    user = user_service.register(data)
    return _login_response(user, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticate user and return an access token
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - email
            - password
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: Login successful
      401:
        description: Invalid credentials
      404:
        description: User not found
    """
    data = json_object(request.get_json(silent=True))
    user = user_service.authenticate(data.get('email'), data.get('password'))
    return _login_response(user, 200)


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """
    Logout user (Revoke token)
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logout successful
    """
    BLOCKLIST.add(get_jwt()['jti'])

    response = jsonify({'message': 'Logout successful'})
    unset_jwt_cookies(response)
    return response, 200
