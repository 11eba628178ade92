"""
Core product synchronization: paginated search, upsert by external id and
parent/variant linking.
"""

from typing import Optional

from catalog_sync.adapters.base import EntityStore, LocalProductRecord
from catalog_sync.clients.catalog_client import CatalogClient, EXCLUDE_PARENTS_FILTER
from catalog_sync.clients.records import CatalogAPIError, RemoteCatalogItem
from catalog_sync.services.attribute_projector import AttributeProjector
from catalog_sync.services.sync_context import STATUS_NO_RECORDS, SyncContext, SyncResult
from catalog_sync.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)


DEFAULT_PAGE_SIZE = 100
NO_RECORDS_MESSAGE = "No Records found."


class ParentLinker:
    """
    Reconciles a variant product with its parent (grouping) product.

    The parent is created when missing. An existing parent is re-projected
    from the remote detail at most once per run, no matter how many of its
    variants are synced.
    """

    def __init__(self, catalog_client: CatalogClient, store: EntityStore, projector: AttributeProjector):
        self.catalog_client = catalog_client
        self.store = store
        self.projector = projector

    def link(
        self,
        parent_external_id: str,
        child: LocalProductRecord,
        context: SyncContext
    ) -> Optional[LocalProductRecord]:
        """
        Ensure the parent exists and is fresh, then point the child at it.

        Args:
            parent_external_id: Remote id of the parent product
            child: Local variant record
            context: Run context (counters, refreshed parents, errors)

        Returns:
            Parent record, or None if its detail could not be fetched
            (the child then keeps its previous parent reference)
        """
        parent = self.store.find_product(parent_external_id)

        if parent is None or parent_external_id not in context.updated_parents:
            try:
                detail = self.catalog_client.fetch_product_detail(parent_external_id)
            except CatalogAPIError as e:
                context.record_error("fetch_product_detail", e, external_id=parent_external_id)
                log_with_context(
                    logger, "ERROR",
                    "Failed to fetch parent product",
                    parent_product_id=parent_external_id,
                    product_id=child.external_id,
                    error=str(e)
                )
                return None

            fields = self.projector.project(detail)

            if parent is None:
                parent = self.store.create_product(fields)
                context.counters.parent_product_created += 1
                log_with_context(
                    logger, "INFO",
                    f"Created parent product {parent.title}",
                    parent_product_id=parent_external_id,
                    record_id=parent.id
                )
            else:
                parent = self.store.update_product(parent.id, fields)
                context.counters.parent_product_updated += 1
                log_with_context(
                    logger, "INFO",
                    f"Updated parent product {parent.title}",
                    parent_product_id=parent_external_id,
                    record_id=parent.id
                )

            context.updated_parents.add(parent_external_id)

        self.store.set_product_parent(child.id, parent.id)
        return parent


class ProductSyncEngine:
    """
    Product synchronization service.

    Orchestrates:
    1. Paging through the remote product search (parents excluded)
    2. Fetching each product's detail and projecting it onto local fields
    3. Creating or updating the local record keyed by external id
    4. Linking variants to their parent products
    """

    def __init__(
        self,
        catalog_client: CatalogClient,
        store: EntityStore,
        projector: Optional[AttributeProjector] = None,
        parent_linker: Optional[ParentLinker] = None
    ):
        """
        Initialize engine with collaborators.

        Args:
            catalog_client: Remote catalog API client
            store: Local entity store
            projector: Attribute projector, built on store if omitted
            parent_linker: Parent linker, built from the other collaborators if omitted
        """
        self.catalog_client = catalog_client
        self.store = store
        self.projector = projector or AttributeProjector(store)
        self.parent_linker = parent_linker or ParentLinker(catalog_client, store, self.projector)

    def run(
        self,
        offset: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        context: Optional[SyncContext] = None
    ) -> SyncResult:
        """
        Sync all products from offset to the end of the search results.

        Pages are requested strictly one after another; the offset advances
        by the number of items processed until it reaches the reported total.

        Args:
            offset: Index of first product to sync
            limit: Page size
            context: Run context, a fresh one is created if omitted

        Returns:
            SyncResult with product counters and any remote errors
        """
        context = context or SyncContext()
        first_page = True

        while True:
            try:
                page = self.catalog_client.fetch_product_page(offset, limit, EXCLUDE_PARENTS_FILTER)
            except CatalogAPIError as e:
                context.record_error("fetch_product_page", e, offset=offset)
                log_with_context(
                    logger, "ERROR",
                    "Failed to fetch product page",
                    offset=offset,
                    limit=limit,
                    error=str(e)
                )
                break

            if first_page and page.total_count == 0:
                log_with_context(logger, "INFO", NO_RECORDS_MESSAGE, offset=offset)
                return SyncResult.from_context(context, NO_RECORDS_MESSAGE, status=STATUS_NO_RECORDS)
            first_page = False

            if not page.items:
                if offset < page.total_count:
                    log_with_context(
                        logger, "WARNING",
                        "Empty page before reaching total count",
                        offset=offset,
                        total_count=page.total_count
                    )
                break

            for item in page.items:
                self.sync_item(item, context)
                offset += 1

            log_with_context(
                logger, "INFO",
                "Processed product page",
                offset=offset,
                total_count=page.total_count,
                page_items=len(page.items)
            )

            if offset >= page.total_count:
                break

        message = context.counters.product_summary()
        log_with_context(
            logger, "INFO",
            message,
            product_created=context.counters.product_created,
            product_updated=context.counters.product_updated,
            parent_product_created=context.counters.parent_product_created,
            parent_product_updated=context.counters.parent_product_updated,
            errors=len(context.errors)
        )
        return SyncResult.from_context(context, message)

    def sync_item(self, item: RemoteCatalogItem, context: SyncContext) -> Optional[LocalProductRecord]:
        """
        Create or update one product and reconcile its parent.

        Args:
            item: Product from the search listing
            context: Run context

        Returns:
            Local record, or None if the item was skipped
        """
        if item.external_id in context.visited:
            log_with_context(
                logger, "WARNING",
                "Product already processed in this run, skipping",
                product_id=item.external_id
            )
            return None
        context.visited.add(item.external_id)

        record = self.store.find_product(item.external_id)

        try:
            detail = self.catalog_client.fetch_product_detail(item.external_id)
        except CatalogAPIError as e:
            context.record_error("fetch_product_detail", e, external_id=item.external_id)
            log_with_context(
                logger, "ERROR",
                "Failed to fetch product detail",
                product_id=item.external_id,
                error=str(e)
            )
            return None

        fields = self.projector.project(detail)

        if record is None:
            record = self.store.create_product(fields)
            context.counters.product_created += 1
            log_with_context(
                logger, "INFO",
                f"Created product {item.name}",
                product_id=item.external_id,
                record_id=record.id
            )
        else:
            record = self.store.update_product(record.id, fields)
            context.counters.product_updated += 1
            log_with_context(
                logger, "INFO",
                f"Updated product {item.name}",
                product_id=item.external_id,
                record_id=record.id
            )

        parent_external_id = item.parent_external_id or detail.parent_external_id
        if parent_external_id:
            self.parent_linker.link(parent_external_id, record, context)
        elif record.parent_id is not None:
            record = self.store.set_product_parent(record.id, None)
            log_with_context(
                logger, "INFO",
                "Cleared parent product reference",
                product_id=item.external_id,
                record_id=record.id
            )

        return record
