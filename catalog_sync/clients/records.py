"""
Typed records parsed from remote catalog API payloads.

The remote API returns loosely structured JSON. Everything the sync engines
read is parsed here into explicit records so that missing required fields
surface as DecodeError at the client boundary instead of KeyError deep
inside a sync run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


class CatalogAPIError(Exception):
    """Base exception for remote catalog API errors."""
    pass


class NetworkError(CatalogAPIError):
    """Transport failure or non-success HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(CatalogAPIError):
    """Response body is not JSON or misses required fields."""
    pass


@dataclass
class RemoteTerm:
    """Product category or product type as listed by the remote catalog."""

    external_id: str
    name: str


@dataclass
class RemoteCategoryRef:
    """Category reference on a product, optionally nesting one sub-category."""

    external_id: str
    sub_category: Optional['RemoteCategoryRef'] = None


@dataclass
class RemoteAttribute:
    """
    Single product attribute.

    Attributes are matched by the (type, name, group_name) triple.
    """

    type: str
    name: str
    group_name: str
    values: List[Any] = field(default_factory=list)


@dataclass
class RemoteCatalogItem:
    """Product as returned by the search listing or the detail endpoint."""

    external_id: str
    name: str
    sku: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    type_external_id: Optional[str] = None
    categories: List[RemoteCategoryRef] = field(default_factory=list)
    attributes: List[RemoteAttribute] = field(default_factory=list)
    parent_external_id: Optional[str] = None
    # JSON object the item was parsed from, unchanged
    payload: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class Page:
    """One page of a listing call."""

    items: List[Any]
    total_count: int


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse ISO-8601 timestamp as sent by the remote API.

    Args:
        value: Timestamp string (e.g. "2024-03-01T10:15:00Z") or None

    Returns:
        datetime or None if value is empty

    Raises:
        DecodeError: If value is not a valid timestamp
    """
    if not value:
        return None

    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        raise DecodeError(f"Invalid timestamp: {value!r}")


def parse_term(data: Dict, kind: str) -> RemoteTerm:
    """
    Parse a taxonomy listing item.

    Args:
        data: Item from /product-categories or /product-types
        kind: Resource kind ("category" or "type"); selects the id key

    Returns:
        RemoteTerm

    Raises:
        DecodeError: If id or name is missing
    """
    id_key = f"product_{kind}_id"
    if not isinstance(data, dict) or not data.get(id_key) or not data.get('name'):
        raise DecodeError(f"Term item misses '{id_key}' or 'name'")

    return RemoteTerm(external_id=str(data[id_key]), name=str(data['name']))


def _parse_category(data: Any) -> Optional[RemoteCategoryRef]:
    # The first entry may be a category path (list) rather than a single category
    if isinstance(data, list):
        data = data[0] if data else None

    if not isinstance(data, dict) or not data.get('product_category_id'):
        return None

    return RemoteCategoryRef(
        external_id=str(data['product_category_id']),
        sub_category=_parse_category(data.get('sub_category'))
    )


def _parse_attribute(data: Dict) -> Optional[RemoteAttribute]:
    if not isinstance(data, dict):
        return None

    group = data.get('attribute_group') or {}
    group_name = group.get('name', '') if isinstance(group, dict) else str(group)

    values = data.get('values') or []
    if not isinstance(values, list):
        values = [values]

    return RemoteAttribute(
        type=str(data.get('type', '')),
        name=str(data.get('name', '')),
        group_name=group_name,
        values=values
    )


def parse_product(data: Dict) -> RemoteCatalogItem:
    """
    Parse product payload from search listing or detail endpoint.

    Args:
        data: Product JSON object

    Returns:
        RemoteCatalogItem

    Raises:
        DecodeError: If product_id or name is missing
    """
    if not isinstance(data, dict) or not data.get('product_id') or not data.get('name'):
        raise DecodeError("Product item misses 'product_id' or 'name'")

    product_type = data.get('product_type') or {}
    type_external_id = product_type.get('product_type_id') if isinstance(product_type, dict) else None

    parent = data.get('parent_product') or {}
    parent_external_id = parent.get('parent_product_id') if isinstance(parent, dict) else None

    categories = []
    for entry in data.get('product_categories') or []:
        category = _parse_category(entry)
        if category:
            categories.append(category)

    attributes = []
    for entry in data.get('attributes') or []:
        attribute = _parse_attribute(entry)
        if attribute:
            attributes.append(attribute)

    return RemoteCatalogItem(
        external_id=str(data['product_id']),
        name=str(data['name']),
        sku=data.get('sku'),
        created_at=parse_timestamp(data.get('created_date')),
        updated_at=parse_timestamp(data.get('last_updated_timestamp')),
        type_external_id=str(type_external_id) if type_external_id else None,
        categories=categories,
        attributes=attributes,
        parent_external_id=str(parent_external_id) if parent_external_id else None,
        payload=data
    )
