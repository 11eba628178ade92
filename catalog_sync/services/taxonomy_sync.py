"""
Materializes product type and product category vocabularies from the
remote catalog.
"""

from typing import List, Optional, Tuple

from catalog_sync.adapters.base import EntityStore
from catalog_sync.clients.catalog_client import CatalogClient
from catalog_sync.clients.records import CatalogAPIError
from catalog_sync.services.sync_context import SyncContext, SyncResult
from catalog_sync.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)


# kind -> hierarchical
TERM_KINDS = {
    "category": True,
    "type": False,
}


class UnrecognizedKind(ValueError):
    """Requested taxonomy resource kind is not known."""

    def __init__(self, kind: str):
        super().__init__(f"product detail {kind} not recognized.")
        self.kind = kind


class TaxonomySyncEngine:
    """
    Creates taxonomy terms for remote categories or types.

    Terms are de-duplicated by (vocabulary, external id); existing terms are
    left untouched. Categories are hierarchical: the children of every listed
    category are fetched with the parent filter and attached to the parent
    term, level by level, until a branch has no children. Parents are
    always stored before their children.
    """

    def __init__(self, catalog_client: CatalogClient, store: EntityStore):
        """
        Initialize engine.

        Args:
            catalog_client: Remote catalog API client
            store: Local entity store
        """
        self.catalog_client = catalog_client
        self.store = store

    def run(self, kind: str, context: Optional[SyncContext] = None) -> SyncResult:
        """
        Sync all terms of one kind.

        Args:
            kind: "category" (hierarchical) or "type" (flat)
            context: Run context, a fresh one is created if omitted

        Returns:
            SyncResult with terms_created counter and any remote errors

        Raises:
            UnrecognizedKind: If kind is neither "category" nor "type"
        """
        if kind not in TERM_KINDS:
            log_with_context(logger, "ERROR", "Taxonomy kind not recognized", kind=kind)
            raise UnrecognizedKind(kind)

        context = context or SyncContext()
        hierarchical = TERM_KINDS[kind]
        vocabulary = f"product_{kind}"

        # (remote parent id, local parent term id); None is the top level
        pending: List[Tuple[Optional[str], Optional[int]]] = [(None, None)]
        expanded = set()

        while pending:
            parent_external_id, parent_term_id = pending.pop()

            try:
                page = self.catalog_client.fetch_term_page(kind, parent_external_id)
            except CatalogAPIError as e:
                context.record_error("fetch_term_page", e, external_id=parent_external_id)
                log_with_context(
                    logger, "ERROR",
                    "Failed to fetch taxonomy terms",
                    kind=kind,
                    parent_id=parent_external_id,
                    error=str(e)
                )
                continue

            if page.total_count > len(page.items):
                log_with_context(
                    logger, "WARNING",
                    "Term listing returned fewer items than reported",
                    kind=kind,
                    parent_id=parent_external_id,
                    returned=len(page.items),
                    total_count=page.total_count
                )

            children = []
            for remote_term in page.items:
                term = self.store.find_term(vocabulary, remote_term.external_id)

                if term is None:
                    term = self.store.create_term(
                        name=remote_term.name,
                        vocabulary=vocabulary,
                        external_id=remote_term.external_id,
                        parent_id=parent_term_id if hierarchical else None
                    )
                    context.counters.terms_created += 1
                    log_with_context(
                        logger, "INFO",
                        f"Created {remote_term.name} product {kind} taxonomy term",
                        kind=kind,
                        term_id=term.id,
                        external_id=remote_term.external_id,
                        parent_term_id=term.parent_id
                    )

                if hierarchical and remote_term.external_id not in expanded:
                    expanded.add(remote_term.external_id)
                    children.append((remote_term.external_id, term.id))

            # Reversed so branches are expanded in listing order
            pending.extend(reversed(children))

        message = context.counters.terms_summary(kind)
        log_with_context(
            logger, "INFO",
            message,
            kind=kind,
            terms_created=context.counters.terms_created,
            errors=len(context.errors)
        )
        return SyncResult.from_context(context, message)
