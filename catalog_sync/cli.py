"""
Catalog sync CLI.

Command-line interface for the batch jobs:
- create-product-terms: Create product category/type taxonomy terms
- sync-products: Create/update products and link variants to parents
- init-db: Create the local database schema

Usage:
    catalog-sync create-product-terms category
    catalog-sync create-product-terms type
    catalog-sync sync-products 0 100
    catalog-sync sync-products --dry-run
"""

import sys

import click

from catalog_sync import build_catalog_client
from catalog_sync.adapters.base import EntityStore, StoreError
from catalog_sync.adapters.memory import InMemoryStore
from catalog_sync.adapters.sql import SqlStore
from catalog_sync.config import Config
from catalog_sync.services.attribute_projector import AttributeProjector
from catalog_sync.services.product_sync import ProductSyncEngine
from catalog_sync.services.sync_context import STATUS_NO_RECORDS, STATUS_PARTIAL, SyncResult
from catalog_sync.services.taxonomy_sync import TaxonomySyncEngine, UnrecognizedKind
from catalog_sync.utils.logger import get_logger
from catalog_sync.utils.validators import clamp_paging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_USAGE = 2
EXIT_STORE = 3


@click.group()
@click.pass_context
def cli(ctx):
    """Catalog sync - mirror the remote product catalog into the local store."""
    ctx.ensure_object(dict)


def _validate_config() -> None:
    try:
        Config.validate()
    except ValueError as e:
        click.echo(click.style(f"✗ {e}", fg="red"), err=True)
        sys.exit(EXIT_USAGE)


def _store_failed(error: StoreError) -> None:
    logger.error(f"Local store failure: {error}")
    click.echo(click.style(f"✗ Local store failure: {error}", fg="red"), err=True)
    sys.exit(EXIT_STORE)


def _client(ctx):
    return ctx.obj.get("client") or build_catalog_client()


def _store(ctx, dry_run: bool) -> EntityStore:
    if ctx.obj.get("store") is not None:
        return ctx.obj["store"]

    if dry_run:
        click.echo(click.style("⚠ Dry-run mode: nothing will be persisted", fg="yellow"))
        return InMemoryStore()

    store = SqlStore(Config.DATABASE_URL)
    store.create_tables()
    return store


def _report(result: SyncResult) -> None:
    if result.status == STATUS_NO_RECORDS:
        click.echo(result.message)
        return

    for error in result.errors:
        target = error.external_id or (f"offset {error.offset}" if error.offset is not None else "top level")
        click.echo(click.style(f"✗ {error.operation} ({target}): {error.message}", fg="red"), err=True)

    color = "yellow" if result.status == STATUS_PARTIAL else "green"
    click.echo(click.style(f"✓ {result.message}", fg=color))

    if result.status == STATUS_PARTIAL:
        click.echo(click.style(f"⚠ {len(result.errors)} remote call(s) failed, see log", fg="yellow"))


# =============================================================================
# CREATE PRODUCT TERMS
# =============================================================================

@cli.command("create-product-terms")
@click.argument("kind")
@click.option("--dry-run", is_flag=True, help="Use an in-memory store, persist nothing")
@click.pass_context
def create_product_terms(ctx, kind: str, dry_run: bool):
    """
    Create product taxonomy terms from the remote catalog.

    KIND is "category" (hierarchical) or "type" (flat).

    Examples:
        catalog-sync create-product-terms category
        catalog-sync create-product-terms type
    """
    if ctx.obj.get("client") is None:
        _validate_config()

    try:
        engine = TaxonomySyncEngine(_client(ctx), _store(ctx, dry_run))
        result = engine.run(kind)
    except UnrecognizedKind as e:
        click.echo(click.style(f"✗ {e}", fg="red"), err=True)
        sys.exit(EXIT_USAGE)
    except StoreError as e:
        _store_failed(e)

    _report(result)
    sys.exit(EXIT_PARTIAL if result.status == STATUS_PARTIAL else EXIT_OK)


# =============================================================================
# SYNC PRODUCTS
# =============================================================================

@cli.command("sync-products")
@click.argument("offset", type=int, default=0)
@click.argument("limit", type=int, default=Config.SYNC_PAGE_SIZE)
@click.option("--dry-run", is_flag=True, help="Use an in-memory store, persist nothing")
@click.pass_context
def sync_products(ctx, offset: int, limit: int, dry_run: bool):
    """
    Create or update all products from the remote catalog.

    OFFSET is the first product to sync (0-9999, default 0),
    LIMIT the page size (1-100, default 100).

    Examples:
        catalog-sync sync-products
        catalog-sync sync-products 200 50
    """
    if ctx.obj.get("client") is None:
        _validate_config()

    offset, limit = clamp_paging(offset, limit)

    try:
        store = _store(ctx, dry_run)
        engine = ProductSyncEngine(
            _client(ctx),
            store,
            projector=AttributeProjector(store, Config.ASSET_BUNDLE)
        )
        result = engine.run(offset=offset, limit=limit)
    except StoreError as e:
        _store_failed(e)

    _report(result)
    sys.exit(EXIT_PARTIAL if result.status == STATUS_PARTIAL else EXIT_OK)


# =============================================================================
# INIT DB
# =============================================================================

@cli.command("init-db")
def init_db():
    """Create the local database schema (idempotent)."""
    try:
        SqlStore(Config.DATABASE_URL).create_tables()
    except StoreError as e:
        _store_failed(e)

    logger.info("Database schema created")
    click.echo(click.style("✓ Database schema ready", fg="green"))


if __name__ == "__main__":
    cli()
