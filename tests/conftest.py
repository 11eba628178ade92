"""
Pytest fixtures and test configuration.
"""

import pytest
from unittest.mock import Mock
from catalog_sync.adapters.memory import InMemoryStore
from catalog_sync.clients.catalog_client import CatalogClient
from catalog_sync.clients.records import (
    NetworkError,
    Page,
    RemoteAttribute,
    RemoteCatalogItem,
    RemoteCategoryRef,
    RemoteTerm,
)


@pytest.fixture
def store():
    """Empty in-memory entity store."""
    return InMemoryStore()


@pytest.fixture
def mock_catalog_client():
    """Mock catalog API client."""
    return Mock(spec=CatalogClient)


@pytest.fixture
def make_item():
    """Factory for remote catalog items."""
    def _make_item(
        external_id,
        name=None,
        parent=None,
        type_id=None,
        category=None,
        sub_category=None,
        attributes=None
    ):
        categories = []
        if category:
            sub = RemoteCategoryRef(external_id=sub_category) if sub_category else None
            categories.append(RemoteCategoryRef(external_id=category, sub_category=sub))

        return RemoteCatalogItem(
            external_id=external_id,
            name=name or f"Product {external_id}",
            sku=f"SKU-{external_id}",
            type_external_id=type_id,
            categories=categories,
            attributes=attributes or [],
            parent_external_id=parent
        )

    return _make_item


@pytest.fixture
def color_attribute():
    return RemoteAttribute(type="text", name="Color", group_name="Specifications", values=["Red", "Blue"])


@pytest.fixture
def description_attribute():
    return RemoteAttribute(type="rich_text", name="Description", group_name="General", values=["<p>x</p>"])


@pytest.fixture
def wire_catalog(mock_catalog_client):
    """
    Serve a fixed product list through the mock client.

    Search pages are sliced from products by offset/limit; details are
    looked up by external id in products plus extra_details (parents).
    Returns the mock client.
    """
    def _wire(products, extra_details=None):
        details = {item.external_id: item for item in products}
        details.update({item.external_id: item for item in (extra_details or [])})

        def fetch_product_page(offset, limit, filters=None):
            return Page(items=products[offset:offset + limit], total_count=len(products))

        def fetch_product_detail(external_id):
            if external_id not in details:
                raise NetworkError(f"Product {external_id} not found", status_code=404)
            return details[external_id]

        mock_catalog_client.fetch_product_page.side_effect = fetch_product_page
        mock_catalog_client.fetch_product_detail.side_effect = fetch_product_detail
        return mock_catalog_client

    return _wire


@pytest.fixture
def wire_terms(mock_catalog_client):
    """
    Serve a category tree through the mock client.

    tree maps parent external id (None for top level) to a list of
    (external_id, name) tuples.
    """
    def _wire(tree):
        def fetch_term_page(kind, parent_external_id=None):
            children = tree.get(parent_external_id, [])
            items = [RemoteTerm(external_id=i, name=n) for i, n in children]
            return Page(items=items, total_count=len(items))

        mock_catalog_client.fetch_term_page.side_effect = fetch_term_page
        return mock_catalog_client

    return _wire
