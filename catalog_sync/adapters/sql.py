"""
SQL-backed entity store using SQLAlchemy.

Every create/update runs in its own session and commits immediately, so a
failure mid-run leaves earlier writes in place. Re-running the sync is the
recovery path.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from catalog_sync.adapters.base import (
    DEFAULT_TEXT_FORMAT,
    EntityStore,
    LocalProductRecord,
    MediaAssetRecord,
    ProductFields,
    RichText,
    StoreError,
    TaxonomyTerm,
)
from catalog_sync.adapters.models import (
    Base,
    MediaAssetRow,
    ProductAssetRow,
    ProductCategoryRow,
    ProductRow,
    TermRow,
)


class SqlStore(EntityStore):
    """
    Entity store on any SQLAlchemy-supported database
    (SQLite by default, see DATABASE_URL).
    """

    def __init__(self, database_url: str) -> None:
        self.engine = create_engine(database_url, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Database error: {str(e)}") from e

    @contextmanager
    def _session(self) -> Iterator[Session]:
        s = self.SessionLocal()
        try:
            yield s
            s.commit()
        except SQLAlchemyError as e:
            s.rollback()
            raise StoreError(f"Database error: {str(e)}") from e
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    # ------------------------------------------------------------------ #
    # Terms
    # ------------------------------------------------------------------ #
    def find_term(self, vocabulary: str, external_id: str) -> Optional[TaxonomyTerm]:
        with self._session() as s:
            stmt = select(TermRow).where(TermRow.vocabulary == vocabulary, TermRow.external_id == external_id)
            row = s.execute(stmt).scalar_one_or_none()
            return _to_term(row) if row else None

    def create_term(
        self,
        name: str,
        vocabulary: str,
        external_id: str,
        parent_id: Optional[int] = None
    ) -> TaxonomyTerm:
        with self._session() as s:
            if parent_id is not None and s.get(TermRow, parent_id) is None:
                raise StoreError(f"Parent term {parent_id} does not exist")

            row = TermRow(name=name, vocabulary=vocabulary, external_id=external_id, parent_id=parent_id)
            s.add(row)
            s.flush()
            return _to_term(row)

    # ------------------------------------------------------------------ #
    # Products
    # ------------------------------------------------------------------ #
    def find_product(self, external_id: str) -> Optional[LocalProductRecord]:
        with self._session() as s:
            stmt = select(ProductRow).where(ProductRow.external_id == external_id)
            row = s.execute(stmt).scalar_one_or_none()
            return _to_product(row) if row else None

    def create_product(self, fields: ProductFields) -> LocalProductRecord:
        with self._session() as s:
            row = ProductRow()
            _apply_fields(row, fields)
            s.add(row)
            s.flush()
            return _to_product(row)

    def update_product(self, record_id: int, fields: ProductFields) -> LocalProductRecord:
        with self._session() as s:
            row = self._get_product_row(s, record_id)
            _apply_fields(row, fields)
            s.flush()
            return _to_product(row)

    def set_product_parent(self, record_id: int, parent_id: Optional[int]) -> LocalProductRecord:
        with self._session() as s:
            row = self._get_product_row(s, record_id)
            if parent_id is not None:
                self._get_product_row(s, parent_id)
            row.parent_id = parent_id
            s.flush()
            return _to_product(row)

    @staticmethod
    def _get_product_row(s: Session, record_id: int) -> ProductRow:
        row = s.get(ProductRow, record_id)
        if row is None:
            raise StoreError(f"Product record {record_id} does not exist")
        return row

    # ------------------------------------------------------------------ #
    # Assets
    # ------------------------------------------------------------------ #
    def find_asset(self, external_id: str) -> Optional[MediaAssetRecord]:
        with self._session() as s:
            stmt = select(MediaAssetRow).where(MediaAssetRow.external_id == external_id)
            row = s.execute(stmt).scalar_one_or_none()
            return _to_asset(row) if row else None

    def create_asset(self, external_id: str, bundle: str) -> MediaAssetRecord:
        with self._session() as s:
            row = MediaAssetRow(external_id=external_id, bundle=bundle)
            s.add(row)
            s.flush()
            return _to_asset(row)

    def count(self, kind: str) -> int:
        models = {
            "term": TermRow,
            "product": ProductRow,
            "asset": MediaAssetRow,
        }
        if kind not in models:
            raise ValueError(f"Unknown entity kind: {kind}")

        with self._session() as s:
            return s.execute(select(func.count()).select_from(models[kind])).scalar_one()


def _apply_fields(row: ProductRow, fields: ProductFields) -> None:
    row.external_id = fields.external_id
    row.title = fields.title
    row.sku = fields.sku
    row.created_at = fields.created_at
    row.updated_at = fields.updated_at
    row.type_term_id = fields.type_term_id
    row.color = fields.color
    row.description = fields.description.value if fields.description else None
    row.description_format = fields.description.format if fields.description else None
    row.categories = [
        ProductCategoryRow(position=i, term_id=term_id)
        for i, term_id in enumerate(fields.category_term_ids)
    ]
    row.assets = [
        ProductAssetRow(position=i, asset_id=asset_id)
        for i, asset_id in enumerate(fields.asset_ids)
    ]


def _to_term(row: TermRow) -> TaxonomyTerm:
    return TaxonomyTerm(
        id=row.id,
        name=row.name,
        vocabulary=row.vocabulary,
        external_id=row.external_id,
        parent_id=row.parent_id
    )


def _to_asset(row: MediaAssetRow) -> MediaAssetRecord:
    return MediaAssetRecord(id=row.id, external_id=row.external_id, bundle=row.bundle)


def _to_product(row: ProductRow) -> LocalProductRecord:
    description = None
    if row.description is not None:
        description = RichText(value=row.description, format=row.description_format or DEFAULT_TEXT_FORMAT)

    fields = ProductFields(
        title=row.title,
        external_id=row.external_id,
        sku=row.sku,
        created_at=row.created_at,
        updated_at=row.updated_at,
        type_term_id=row.type_term_id,
        category_term_ids=[c.term_id for c in row.categories],
        color=row.color,
        description=description,
        asset_ids=[a.asset_id for a in row.assets]
    )
    return LocalProductRecord(id=row.id, fields=fields, parent_id=row.parent_id)
