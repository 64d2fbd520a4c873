from http import HTTPStatus

from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from auth.controllers import login_user, get_current_user
from common.decorators import rate_limit
from common.response import error_response
from schemas.auth_schemas import LoginSchema

# Create auth blueprint
auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

@auth_bp.route('/login', methods=['POST'])
@rate_limit(limit=10, per=60, key_prefix='login')
def login():
    """
    Login with email and password.
    ---
    tags:
      - Authentication
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
              format: email
            password:
              type: string
    responses:
      200:
        description: Login successful
        schema:
          type: object
          properties:
            data:
              type: object
              properties:
                token:
                  type: string
                user:
                  type: object
                  properties:
                    id:
                      type: integer
                    email:
                      type: string
                    role:
                      type: string
      400:
        description: Missing or malformed credentials
      401:
        description: Invalid credentials
      403:
        description: Account is disabled
      429:
        description: Rate limit exceeded
    """
    try:
        data = LoginSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return error_response("Email and password are required", HTTPStatus.BAD_REQUEST, err.messages)
    return login_user(data)

@auth_bp.route('/profile', methods=['GET'])
@jwt_required()
def profile():
    """
    Get the signed-in user.
    ---
    tags:
      - Authentication
    security:
      - Bearer: []
    responses:
      200:
        description: Current user
      401:
        description: Missing or invalid token
      404:
        description: User not found
    """
    return get_current_user()
