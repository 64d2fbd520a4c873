import logging
import os
import time
from http import HTTPStatus

import click
import cloudinary
from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flasgger import Swagger
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from config import get_config
from common.database import db
from common.cache import cache
from common.response import error_response
from models import *  # Import all models
from models.user import User, UserRole

from auth.routes import auth_bp
from routes.merchant_routes import merchant_bp
from routes.merchant_category_routes import merchant_category_bp
from routes.coupon_routes import coupon_bp
from routes.blog_routes import blog_bp, blog_category_bp, author_bp
from routes.tag_routes import tag_bp
from routes.import_routes import import_bp
from routes.dashboard_routes import dashboard_bp
from routes.public_routes import public_bp

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]

def create_app(config_name=None):
    """Application factory."""
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    app.url_map.strict_slashes = False

    logging.basicConfig(
        level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    # Configure Cloudinary
    cloudinary.config(
        cloud_name=app.config.get('CLOUDINARY_CLOUD_NAME'),
        api_key=app.config.get('CLOUDINARY_API_KEY'),
        api_secret=app.config.get('CLOUDINARY_API_SECRET'),
        secure=True
    )

    # Configure Swagger
    swagger_config = {
        "headers": [],
        "specs": [
            {
                "endpoint": 'apispec',
                "route": '/apispec.json',
                "rule_filter": lambda rule: True,
                "model_filter": lambda tag: True,
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/docs"
    }

    swagger_template = {
        "swagger": "2.0",
        "info": {
            "title": "Handpicked API",
            "description": "Dashboard and public site API for the Handpicked coupons and deals platform",
            "version": "1.0.0"
        },
        "securityDefinitions": {
            "Bearer": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "JWT Authorization header using the Bearer scheme. Example: \"Authorization: Bearer {token}\""
            }
        }
    }

    Swagger(app, config=swagger_config, template=swagger_template)

    # Configure CORS for the dashboard and the public site
    CORS(app,
         resources={
             r"/api/*": {"origins": app.config['ALLOWED_ORIGINS']},
             r"/public/*": {"origins": app.config['ALLOWED_ORIGINS']},
         },
         supports_credentials=True,
         allow_headers=CORS_HEADERS,
         methods=CORS_METHODS,
         max_age=3600)  # Cache preflight requests for 1 hour

    # Initialize extensions
    db.init_app(app)
    cache.init_app(app)
    jwt = JWTManager(app)
    Migrate(app, db)

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(merchant_bp, url_prefix='/api/merchants')
    app.register_blueprint(merchant_category_bp, url_prefix='/api/merchant-categories')
    app.register_blueprint(coupon_bp, url_prefix='/api/coupons')
    app.register_blueprint(blog_bp, url_prefix='/api/blogs')
    app.register_blueprint(blog_category_bp, url_prefix='/api/blog-categories')
    app.register_blueprint(author_bp, url_prefix='/api/authors')
    app.register_blueprint(tag_bp, url_prefix='/api/tags')
    app.register_blueprint(import_bp, url_prefix='/api/imports')
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(public_bp)

    @app.route('/')
    def index():
        return jsonify({"message": "Handpicked API is running", "docs": "/docs"})

    # Files stored by the local storage provider
    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    # Request timing
    @app.before_request
    def before_request():
        request.start_time = time.time()

    @app.after_request
    def after_request(response):
        if hasattr(request, 'start_time'):
            response_time = (time.time() - request.start_time) * 1000  # Convert to milliseconds
            app.logger.debug(f"{request.method} {request.path} {response.status_code} {response_time:.1f}ms")
        return response

    # JWT errors use the same envelope as the rest of the API
    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_response("Missing or invalid token", HTTPStatus.UNAUTHORIZED, reason)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_response("Missing or invalid token", HTTPStatus.UNAUTHORIZED, reason)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return error_response("Token has expired", HTTPStatus.UNAUTHORIZED)

    # Error handlers
    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return error_response("Validation failed", HTTPStatus.BAD_REQUEST, error.messages)

    @app.errorhandler(404)
    def not_found(error):
        return {"error": "Not Found"}, 404

    @app.errorhandler(413)
    def too_large(error):
        return error_response("Request body too large", HTTPStatus.REQUEST_ENTITY_TOO_LARGE)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_error(error):
        db.session.rollback()
        app.logger.exception(f"Unhandled error on {request.method} {request.path}: {error}")
        return error_response("Internal Server Error", HTTPStatus.INTERNAL_SERVER_ERROR)

    register_commands(app)
    return app

def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created")

    @app.cli.command('create-admin')
    @click.argument('email')
    @click.argument('password')
    @click.option('--role', type=click.Choice([r.value for r in UserRole]), default=UserRole.ADMIN.value,
                  show_default=True)
    def create_admin(email, password, role):
        """Create a dashboard user, or reset the password and role of an existing one."""
        user = User.get_by_email(email)
        if user is None:
            user = User(email=email.strip().lower())
            db.session.add(user)
        user.role = UserRole(role)
        user.is_active = True
        user.set_password(password)
        db.session.commit()
        click.echo(f"User {user.email} saved with role {role}")

if __name__ == "__main__":
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', 5110)))
