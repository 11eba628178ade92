"""
Product detail endpoint proxying the remote catalog.
"""

from flask import Blueprint, request, jsonify
from catalog_sync.clients.records import CatalogAPIError, NetworkError
from catalog_sync.utils.validators import validate_api_token
from catalog_sync.utils.logger import get_logger, log_with_context

bp = Blueprint('products', __name__)
logger = get_logger(__name__)


@bp.route('/api/products/<external_id>', methods=['GET'])
def get_product(external_id):
    """
    Fetch a product from the remote catalog.

    Headers:
        X-Api-Token: shared API token

    Returns:
        200 with the product JSON exactly as the remote catalog sent it
        401 if token is missing or invalid
        404 if the remote catalog does not know the product
        502 on any other remote error
    """
    token = request.headers.get('X-Api-Token')
    if not validate_api_token(token):
        log_with_context(
            logger, "WARNING",
            "Unauthorized product request",
            ip=request.remote_addr
        )
        return jsonify({"status": "error", "message": "Unauthorized"}), 401

    from catalog_sync import get_catalog_client
    client = get_catalog_client()

    try:
        product = client.fetch_product_detail(external_id)
    except NetworkError as e:
        if e.status_code == 404:
            return jsonify({"status": "error", "message": "Product not found"}), 404

        log_with_context(logger, "ERROR", "Product request failed", product_id=external_id, error=str(e))
        return jsonify({"status": "error", "message": str(e)}), 502
    except CatalogAPIError as e:
        log_with_context(logger, "ERROR", "Product request failed", product_id=external_id, error=str(e))
        return jsonify({"status": "error", "message": str(e)}), 502

    return jsonify(product.payload), 200
