"""
Remote catalog (DAM/PIM) REST API client.
"""

import requests
from typing import Dict, List, Optional

from catalog_sync.clients.records import (
    DecodeError,
    NetworkError,
    Page,
    RemoteCatalogItem,
    parse_product,
    parse_term,
)


TERM_ENDPOINTS = {
    "category": "/product-categories",
    "type": "/product-types",
}

# Only solo and variant products; parents are reached through their variants
EXCLUDE_PARENTS_FILTER = [{"type": "exclude_parents"}]


class CatalogClient:
    """Catalog REST API client with bearer authentication."""

    def __init__(self, base_url: str, api_key: str, timeout: int = 30):
        """
        Initialize catalog client.

        Args:
            base_url: API base URL without trailing slash
                      (e.g. https://api.widencollective.com/v2)
            api_key: Bearer API key
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json"
        })

    def fetch_term_page(self, kind: str, parent_external_id: Optional[str] = None) -> Page:
        """
        List product categories or product types.

        GET /product-categories[?parent_product_category_id={id}]
        GET /product-types

        Args:
            kind: "category" or "type"
            parent_external_id: Only list children of this category

        Returns:
            Page of RemoteTerm items

        Raises:
            ValueError: If kind has no endpoint
            NetworkError: If request fails
            DecodeError: If response cannot be parsed
        """
        if kind not in TERM_ENDPOINTS:
            raise ValueError(f"No term endpoint for kind: {kind}")

        params = {}
        if parent_external_id:
            params["parent_product_category_id"] = parent_external_id

        data = self._request("GET", TERM_ENDPOINTS[kind], params=params)
        return Page(
            items=[parse_term(item, kind) for item in self._items(data)],
            total_count=self._total_count(data)
        )

    def fetch_product_page(
        self,
        offset: int,
        limit: int,
        filters: Optional[List[Dict]] = None
    ) -> Page:
        """
        Search products.

        POST /products/search

        Args:
            offset: Index of first product
            limit: Page size
            filters: Search filters, defaults to excluding parent products

        Returns:
            Page of RemoteCatalogItem items

        Raises:
            NetworkError: If request fails
            DecodeError: If response cannot be parsed
        """
        payload = {
            "offset": offset,
            "limit": limit,
            "filters": filters if filters is not None else EXCLUDE_PARENTS_FILTER,
            "expand": ["attributes"]
        }

        data = self._request("POST", "/products/search", json=payload)
        return Page(
            items=[parse_product(item) for item in self._items(data)],
            total_count=self._total_count(data)
        )

    def fetch_product_detail(self, external_id: str) -> RemoteCatalogItem:
        """
        Fetch full product details.

        GET /products/{external_id}

        Args:
            external_id: Remote product ID

        Returns:
            RemoteCatalogItem

        Raises:
            NetworkError: If request fails (status_code 404 if not found)
            DecodeError: If response cannot be parsed
        """
        data = self._request("GET", f"/products/{external_id}")
        return parse_product(data)

    def _request(self, method: str, path: str, **kwargs) -> Dict:
        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(f"Catalog API request failed: {str(e)}")

        if not response.ok:
            raise NetworkError(
                f"Catalog API {method} {path} returned {response.status_code}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"Catalog API {method} {path} returned invalid JSON: {str(e)}")

        if not isinstance(data, dict):
            raise DecodeError(f"Catalog API {method} {path} returned {type(data).__name__}, expected object")

        return data

    @staticmethod
    def _items(data: Dict) -> List:
        items = data.get('items', [])
        if not isinstance(items, list):
            raise DecodeError("'items' is not a list")
        return items

    @staticmethod
    def _total_count(data: Dict) -> int:
        try:
            return int(data.get('total_count', 0))
        except (TypeError, ValueError):
            raise DecodeError(f"Invalid total_count: {data.get('total_count')!r}")
