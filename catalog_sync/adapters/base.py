"""
Abstract base classes for local entity store adapters.

Uses Adapter Pattern so the sync engines work the same against the
SQL database and the in-memory store used for dry runs and tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from dataclasses import dataclass, field


VOCABULARY_TYPE = "product_type"
VOCABULARY_CATEGORY = "product_category"

DEFAULT_TEXT_FORMAT = "full_html"


@dataclass
class TaxonomyTerm:
    """Local taxonomy term. External id is unique within its vocabulary."""

    id: int
    name: str
    vocabulary: str
    external_id: str
    parent_id: Optional[int] = None


@dataclass
class MediaAssetRecord:
    """Local media entity pointing at a remote DAM asset."""

    id: int
    external_id: str
    bundle: str


@dataclass
class RichText:
    """Formatted text value."""

    value: str
    format: str = DEFAULT_TEXT_FORMAT


@dataclass
class ProductFields:
    """
    Local product fields projected from a remote catalog item.

    Written as a whole on create and update; the parent reference is
    managed separately.
    """

    title: str
    external_id: str
    sku: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    type_term_id: Optional[int] = None
    category_term_ids: List[int] = field(default_factory=list)
    color: Optional[str] = None
    description: Optional[RichText] = None
    asset_ids: List[int] = field(default_factory=list)


@dataclass
class LocalProductRecord:
    """Local product record. External id is unique among products."""

    id: int
    fields: ProductFields
    parent_id: Optional[int] = None

    @property
    def external_id(self) -> str:
        return self.fields.external_id

    @property
    def title(self) -> str:
        return self.fields.title


class EntityStore(ABC):
    """Abstract base class for local entity stores."""

    @abstractmethod
    def find_term(self, vocabulary: str, external_id: str) -> Optional[TaxonomyTerm]:
        """
        Find term by external id within a vocabulary.

        Args:
            vocabulary: Vocabulary id (product_type or product_category)
            external_id: Remote term id

        Returns:
            TaxonomyTerm or None if not found
        """
        pass

    @abstractmethod
    def create_term(
        self,
        name: str,
        vocabulary: str,
        external_id: str,
        parent_id: Optional[int] = None
    ) -> TaxonomyTerm:
        """
        Create taxonomy term.

        Args:
            name: Term name
            vocabulary: Vocabulary id
            external_id: Remote term id
            parent_id: Local id of parent term (must already exist)

        Returns:
            Created TaxonomyTerm

        Raises:
            StoreError: If the term cannot be stored
        """
        pass

    @abstractmethod
    def find_product(self, external_id: str) -> Optional[LocalProductRecord]:
        """
        Find product by external id. Also used to look up parent products.

        Args:
            external_id: Remote product id

        Returns:
            LocalProductRecord or None if not found
        """
        pass

    @abstractmethod
    def create_product(self, fields: ProductFields) -> LocalProductRecord:
        """
        Create product record.

        Raises:
            StoreError: If the product cannot be stored
        """
        pass

    @abstractmethod
    def update_product(self, record_id: int, fields: ProductFields) -> LocalProductRecord:
        """
        Overwrite mapped fields of an existing product. Keeps parent reference.

        Raises:
            StoreError: If record does not exist or cannot be stored
        """
        pass

    @abstractmethod
    def set_product_parent(self, record_id: int, parent_id: Optional[int]) -> LocalProductRecord:
        """
        Set or clear the parent product reference and persist the record.

        Raises:
            StoreError: If record does not exist or cannot be stored
        """
        pass

    @abstractmethod
    def find_asset(self, external_id: str) -> Optional[MediaAssetRecord]:
        """Find media asset by remote asset id."""
        pass

    @abstractmethod
    def create_asset(self, external_id: str, bundle: str) -> MediaAssetRecord:
        """
        Create media asset record.

        Raises:
            StoreError: If the asset cannot be stored
        """
        pass

    @abstractmethod
    def count(self, kind: str) -> int:
        """
        Count stored entities.

        Args:
            kind: "term", "product" or "asset"

        Returns:
            Number of stored entities of that kind
        """
        pass


class StoreError(Exception):
    """Base exception for local store errors."""
    pass
