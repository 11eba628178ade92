"""
Flask application factory and client initialization.
"""

from flask import Flask, jsonify
from catalog_sync.config import Config
from catalog_sync.clients.catalog_client import CatalogClient
from catalog_sync.utils.logger import get_logger

logger = get_logger(__name__)

# Global client instance
_catalog_client = None


def create_app(catalog_client: CatalogClient = None):
    """
    Create and configure Flask application.

    Args:
        catalog_client: Client to use instead of one built from Config

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    # Validate configuration
    try:
        Config.validate(Config.WEB_REQUIRED)
        logger.info("Configuration validated successfully")
    except ValueError as e:
        logger.error(f"Configuration validation failed: {str(e)}")
        raise

    global _catalog_client

    if catalog_client is None:
        catalog_client = build_catalog_client()
    _catalog_client = catalog_client
    logger.info("Initialized catalog client")

    # Register blueprints
    from catalog_sync.views import products
    app.register_blueprint(products.bp)
    logger.info("Registered blueprints")

    # Health check endpoint
    @app.route('/health', methods=['GET'])
    def health():
        """
        Health check endpoint.

        Returns:
            200 OK if application is healthy
        """
        return jsonify({"status": "healthy"}), 200

    logger.info("Application initialized successfully")

    return app


def build_catalog_client() -> CatalogClient:
    """Build catalog client from Config."""
    return CatalogClient(
        Config.CATALOG_API_URL,
        Config.CATALOG_API_KEY,
        Config.API_TIMEOUT
    )


def get_catalog_client() -> CatalogClient:
    """
    Get global catalog client instance.

    Returns:
        CatalogClient instance
    """
    return _catalog_client
