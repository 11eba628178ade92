"""
Projection of remote catalog items onto local product fields.

Only a handful of remote attributes are mapped; they are matched by
(type, name, attribute group name):

- ("text", "Color", "Specifications")     -> color (first value)
- ("rich_text", "Description", "General") -> description (first value, full_html)
- ("asset", any, any)                     -> media asset references

Everything else is ignored.
"""

from typing import Any, List, Optional

from catalog_sync.adapters.base import (
    DEFAULT_TEXT_FORMAT,
    VOCABULARY_CATEGORY,
    VOCABULARY_TYPE,
    EntityStore,
    ProductFields,
    RichText,
)
from catalog_sync.clients.records import RemoteAttribute, RemoteCatalogItem, RemoteCategoryRef
from catalog_sync.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)


COLOR_ATTRIBUTE = ("text", "Color", "Specifications")
DESCRIPTION_ATTRIBUTE = ("rich_text", "Description", "General")
ASSET_TYPE = "asset"


class AttributeProjector:
    """
    Maps RemoteCatalogItem to ProductFields.

    Resolves category and type references to existing terms (never creates
    terms) and media assets to local asset records (creating missing ones,
    de-duplicated by external asset id).
    """

    def __init__(self, store: EntityStore, asset_bundle: str = "acquia_dam_image_asset"):
        """
        Initialize projector.

        Args:
            store: Local entity store for term and asset lookups
            asset_bundle: Media bundle for newly created asset records
        """
        self.store = store
        self.asset_bundle = asset_bundle

    def project(self, item: RemoteCatalogItem) -> ProductFields:
        """
        Build local product fields from a remote item.

        Args:
            item: Product detail from the remote catalog

        Returns:
            ProductFields ready for create or update
        """
        fields = ProductFields(
            title=item.name,
            external_id=item.external_id,
            sku=item.sku,
            created_at=item.created_at,
            updated_at=item.updated_at,
            type_term_id=self._resolve_type(item),
            category_term_ids=self._resolve_categories(item)
        )

        asset_ids: List[int] = []
        for attribute in item.attributes:
            key = (attribute.type, attribute.name, attribute.group_name)

            if key == COLOR_ATTRIBUTE:
                fields.color = _first_value(attribute)
            elif key == DESCRIPTION_ATTRIBUTE:
                fields.description = RichText(value=_first_value(attribute), format=DEFAULT_TEXT_FORMAT)
            elif attribute.type == ASSET_TYPE:
                for asset_id in self._resolve_assets(attribute):
                    if asset_id not in asset_ids:
                        asset_ids.append(asset_id)

        fields.asset_ids = asset_ids
        return fields

    def _resolve_type(self, item: RemoteCatalogItem) -> Optional[int]:
        if not item.type_external_id:
            return None

        term = self.store.find_term(VOCABULARY_TYPE, item.type_external_id)
        if term is None:
            log_with_context(
                logger, "WARNING",
                "Product type term missing, run create-product-terms type",
                product_id=item.external_id,
                product_type_id=item.type_external_id
            )
            return None

        return term.id

    def _resolve_categories(self, item: RemoteCatalogItem) -> List[int]:
        """Resolve the first category entry and its sub-category, if any."""
        if not item.categories:
            return []

        first: RemoteCategoryRef = item.categories[0]
        refs = [first]
        if first.sub_category is not None:
            refs.append(first.sub_category)

        term_ids = []
        for ref in refs:
            term = self.store.find_term(VOCABULARY_CATEGORY, ref.external_id)
            if term is None:
                log_with_context(
                    logger, "WARNING",
                    "Product category term missing, run create-product-terms category",
                    product_id=item.external_id,
                    product_category_id=ref.external_id
                )
                continue
            term_ids.append(term.id)

        return term_ids

    def _resolve_assets(self, attribute: RemoteAttribute) -> List[int]:
        asset_ids = []
        for value in attribute.values:
            external_id = _asset_external_id(value)
            if not external_id:
                continue

            asset = self.store.find_asset(external_id)
            if asset is None:
                asset = self.store.create_asset(external_id, self.asset_bundle)
                log_with_context(
                    logger, "INFO",
                    "Created media asset",
                    asset_id=external_id,
                    media_id=asset.id
                )

            asset_ids.append(asset.id)

        return asset_ids


def _first_value(attribute: RemoteAttribute) -> str:
    if not attribute.values or attribute.values[0] is None:
        return ''
    return str(attribute.values[0])


def _asset_external_id(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        value = value.get('asset_id') or value.get('id')
    return str(value) if value else None
