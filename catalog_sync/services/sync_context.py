"""
Per-run state of a synchronization: counters, refreshed parents, errors.

A fresh SyncContext is created for every run and passed through the call
chain; nothing here outlives the run.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set


STATUS_SUCCESS = "success"
STATUS_PARTIAL = "partial"
STATUS_NO_RECORDS = "no_records"


@dataclass
class SyncCounters:
    """Tally of created/updated entities during one run."""

    terms_created: int = 0
    product_created: int = 0
    product_updated: int = 0
    parent_product_created: int = 0
    parent_product_updated: int = 0

    def product_summary(self) -> str:
        return (
            f"Created {self.product_created} products, "
            f"{self.parent_product_created} parent products and updated "
            f"{self.product_updated} products and "
            f"{self.parent_product_updated} parent products."
        )

    def terms_summary(self, kind: str) -> str:
        return f"Total {self.terms_created} product {kind} taxonomy terms created."


@dataclass
class SyncError:
    """A remote call that failed and stopped part of the run."""

    operation: str
    message: str
    external_id: Optional[str] = None
    offset: Optional[int] = None


@dataclass
class SyncContext:
    counters: SyncCounters = field(default_factory=SyncCounters)
    # External ids of parent products already re-projected in this run
    updated_parents: Set[str] = field(default_factory=set)
    # External ids of products already processed in this run
    visited: Set[str] = field(default_factory=set)
    errors: List[SyncError] = field(default_factory=list)

    def record_error(
        self,
        operation: str,
        error: Exception,
        external_id: Optional[str] = None,
        offset: Optional[int] = None
    ) -> SyncError:
        sync_error = SyncError(
            operation=operation,
            message=str(error),
            external_id=external_id,
            offset=offset
        )
        self.errors.append(sync_error)
        return sync_error


@dataclass
class SyncResult:
    """
    Outcome of a run.

    status is "success", "partial" (some remote calls failed, see errors)
    or "no_records" (the product search reported nothing to sync).
    """

    status: str
    counters: SyncCounters
    errors: List[SyncError]
    message: str

    @classmethod
    def from_context(cls, context: SyncContext, message: str, status: Optional[str] = None) -> 'SyncResult':
        if status is None:
            status = STATUS_PARTIAL if context.errors else STATUS_SUCCESS
        return cls(
            status=status,
            counters=context.counters,
            errors=list(context.errors),
            message=message
        )
