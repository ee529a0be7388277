import logging
import os

from flask import Flask, jsonify, request

from config import Config
from extensions import db, cache, limiter


SHARED_CACHE_TYPES = {
    "rediscache",
    "redissentinelcache",
    "redisclustercache",
    "memcachedcache",
    "saslmemcachedcache",
    "filesystemcache",
}


def is_shared_cache(cache_type):
    """True for cache backends every worker process sees the same way."""
    if not cache_type or not isinstance(cache_type, str):
        return False
    return cache_type.rsplit(".", 1)[-1].lower() in SHARED_CACHE_TYPES


def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    cache.init_app(app)
    limiter.init_app(app)

    from services.attachment_store import AttachmentStore
    from services.material_repository import MaterialRepository
    from services.material_service import MaterialService

    upload_root = os.path.join(app.root_path, app.config["UPLOAD_FOLDER"])
    store = AttachmentStore(upload_root)
    repository = MaterialRepository(same_attachment=store.same_content)
    app.extensions["materials"] = MaterialService(
        store,
        repository,
        compensate=app.config.get("MATERIALS_COMPENSATE_ON_FAILURE", False),
        # A per-process cache would keep serving deleted rows in other workers
        cache_list=is_shared_cache(app.config.get("CACHE_TYPE")),
    )

    @app.after_request
    def add_cors_headers(response):
        allowed = [o.strip() for o in app.config.get("CORS_ORIGINS", "*").split(",")]
        origin = request.headers.get("Origin")
        if "*" in allowed:
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in allowed:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers.add("Vary", "Origin")
        else:
            return response

        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    # Import and register blueprints
    from routes.materials import materials_bp
    from routes.uploads import uploads_bp

    app.register_blueprint(materials_bp, url_prefix="/api/materials")
    app.register_blueprint(uploads_bp, url_prefix="/uploads")

    from commands import register_commands

    register_commands(app)

    @app.route("/health")
    def health_check():
        """Health check endpoint"""
        return jsonify(
            {
                "status": "healthy",
                "environment": app.config.get("FLASK_ENV", "production"),
            }
        )

    with app.app_context():
        from models.material import Material  # noqa: F401

        db.create_all()
        app.logger.debug(
            f"SQLALCHEMY_DATABASE_URI: {app.config.get('SQLALCHEMY_DATABASE_URI')}"
        )

    return app


# Create app instance (skip during test collection to avoid touching the real DB)
if os.environ.get("TESTING") != "True":
    app = create_app()
else:
    # Create a placeholder for imports during testing
    app = None

if __name__ == "__main__":
    # Local development server
    if app is not None:
        app.run(
            debug=os.environ.get("FLASK_DEBUG", "False").lower() == "true",
            host="0.0.0.0",
            port=int(os.environ.get("PORT", 5000)),
        )
