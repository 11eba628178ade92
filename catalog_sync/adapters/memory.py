"""
Lightweight in-memory entity store.

Used for dry runs (nothing is persisted) and in tests. Implements the same
interface as the SQL store.
"""

from copy import deepcopy
from typing import Dict, Optional, Tuple

from catalog_sync.adapters.base import (
    EntityStore,
    LocalProductRecord,
    MediaAssetRecord,
    ProductFields,
    StoreError,
    TaxonomyTerm,
)


class InMemoryStore(EntityStore):
    """Dictionary-backed store. Ids are assigned sequentially per entity kind."""

    def __init__(self) -> None:
        self.terms: Dict[int, TaxonomyTerm] = {}
        self.products: Dict[int, LocalProductRecord] = {}
        self.assets: Dict[int, MediaAssetRecord] = {}

        self._term_index: Dict[Tuple[str, str], int] = {}
        self._product_index: Dict[str, int] = {}
        self._asset_index: Dict[str, int] = {}

    # ------------------------------------------------------------------ #
    # Terms
    # ------------------------------------------------------------------ #
    def find_term(self, vocabulary: str, external_id: str) -> Optional[TaxonomyTerm]:
        term_id = self._term_index.get((vocabulary, external_id))
        return self.terms[term_id] if term_id is not None else None

    def create_term(
        self,
        name: str,
        vocabulary: str,
        external_id: str,
        parent_id: Optional[int] = None
    ) -> TaxonomyTerm:
        if (vocabulary, external_id) in self._term_index:
            raise StoreError(f"Term {external_id} already exists in {vocabulary}")
        if parent_id is not None and parent_id not in self.terms:
            raise StoreError(f"Parent term {parent_id} does not exist")

        term = TaxonomyTerm(
            id=len(self.terms) + 1,
            name=name,
            vocabulary=vocabulary,
            external_id=external_id,
            parent_id=parent_id
        )
        self.terms[term.id] = term
        self._term_index[(vocabulary, external_id)] = term.id
        return term

    # ------------------------------------------------------------------ #
    # Products
    # ------------------------------------------------------------------ #
    def find_product(self, external_id: str) -> Optional[LocalProductRecord]:
        record_id = self._product_index.get(external_id)
        return self.products[record_id] if record_id is not None else None

    def create_product(self, fields: ProductFields) -> LocalProductRecord:
        if fields.external_id in self._product_index:
            raise StoreError(f"Product {fields.external_id} already exists")

        record = LocalProductRecord(id=len(self.products) + 1, fields=deepcopy(fields))
        self.products[record.id] = record
        self._product_index[fields.external_id] = record.id
        return record

    def update_product(self, record_id: int, fields: ProductFields) -> LocalProductRecord:
        record = self._get_product(record_id)

        if fields.external_id != record.external_id:
            if fields.external_id in self._product_index:
                raise StoreError(f"Product {fields.external_id} already exists")
            del self._product_index[record.external_id]
            self._product_index[fields.external_id] = record_id

        record.fields = deepcopy(fields)
        return record

    def set_product_parent(self, record_id: int, parent_id: Optional[int]) -> LocalProductRecord:
        record = self._get_product(record_id)
        if parent_id is not None:
            self._get_product(parent_id)

        record.parent_id = parent_id
        return record

    def _get_product(self, record_id: int) -> LocalProductRecord:
        if record_id not in self.products:
            raise StoreError(f"Product record {record_id} does not exist")
        return self.products[record_id]

    # ------------------------------------------------------------------ #
    # Assets
    # ------------------------------------------------------------------ #
    def find_asset(self, external_id: str) -> Optional[MediaAssetRecord]:
        asset_id = self._asset_index.get(external_id)
        return self.assets[asset_id] if asset_id is not None else None

    def create_asset(self, external_id: str, bundle: str) -> MediaAssetRecord:
        if external_id in self._asset_index:
            raise StoreError(f"Asset {external_id} already exists")

        asset = MediaAssetRecord(id=len(self.assets) + 1, external_id=external_id, bundle=bundle)
        self.assets[asset.id] = asset
        self._asset_index[external_id] = asset.id
        return asset

    def count(self, kind: str) -> int:
        collections = {
            "term": self.terms,
            "product": self.products,
            "asset": self.assets,
        }
        if kind not in collections:
            raise ValueError(f"Unknown entity kind: {kind}")
        return len(collections[kind])
