"""
Tests for the command-line entry points.
"""

import pytest
from click.testing import CliRunner
from catalog_sync.cli import cli
from catalog_sync.adapters.base import StoreError
from catalog_sync.clients.records import NetworkError, Page


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_obj(mock_catalog_client, store):
    return {"client": mock_catalog_client, "store": store}


def test_create_product_terms_reports_total(runner, cli_obj, wire_terms):
    """Test term creation summary output."""
    wire_terms({None: [("t1", "Chair"), ("t2", "Lamp")]})

    result = runner.invoke(cli, ["create-product-terms", "type"], obj=cli_obj)

    assert result.exit_code == 0
    assert "Total 2 product type taxonomy terms created." in result.output


def test_create_product_terms_unknown_kind_exits_with_usage_error(runner, cli_obj, mock_catalog_client):
    """Test unknown kind exit code."""
    result = runner.invoke(cli, ["create-product-terms", "brand"], obj=cli_obj)

    assert result.exit_code == 2
    assert "product detail brand not recognized." in result.output
    mock_catalog_client.fetch_term_page.assert_not_called()


def test_sync_products_prints_summary(runner, cli_obj, wire_catalog, make_item, store):
    """Test product sync summary output."""
    wire_catalog([make_item("v1", parent="g1"), make_item("p2")], extra_details=[make_item("g1")])

    result = runner.invoke(cli, ["sync-products"], obj=cli_obj)

    assert result.exit_code == 0
    assert (
        "Created 2 products, 1 parent products and updated 0 products and 0 parent products."
        in result.output
    )
    assert store.count("product") == 3


def test_sync_products_passes_offset_and_clamped_limit(runner, cli_obj, mock_catalog_client):
    """Test that paging arguments are clamped."""
    mock_catalog_client.fetch_product_page.return_value = Page(items=[], total_count=0)

    runner.invoke(cli, ["sync-products", "20", "500"], obj=cli_obj)

    args = mock_catalog_client.fetch_product_page.call_args.args
    assert args[0] == 20
    assert args[1] == 100


def test_sync_products_no_records(runner, cli_obj, mock_catalog_client):
    """Test empty catalog message."""
    mock_catalog_client.fetch_product_page.return_value = Page(items=[], total_count=0)

    result = runner.invoke(cli, ["sync-products"], obj=cli_obj)

    assert result.exit_code == 0
    assert "No Records found." in result.output


def test_sync_products_partial_failure_exit_code(runner, cli_obj, mock_catalog_client):
    """Test exit code when a remote call fails."""
    mock_catalog_client.fetch_product_page.side_effect = NetworkError(
        "Catalog API POST /products/search returned 401", status_code=401
    )

    result = runner.invoke(cli, ["sync-products"], obj=cli_obj)

    assert result.exit_code == 1
    assert "returned 401" in result.output


def test_missing_configuration_exits_with_usage_error(runner, monkeypatch):
    """Test missing configuration."""
    from catalog_sync.config import Config

    monkeypatch.setattr(Config, "CATALOG_API_URL", "")
    monkeypatch.setattr(Config, "CATALOG_API_KEY", "")

    result = runner.invoke(cli, ["sync-products", "--dry-run"], obj={})

    assert result.exit_code == 2
    assert "CATALOG_API_URL" in result.output


def test_init_db_creates_schema(runner, monkeypatch, tmp_path):
    """Test schema creation."""
    from catalog_sync.adapters.sql import SqlStore
    from catalog_sync.config import Config

    database_url = f"sqlite:///{tmp_path / 'catalog.db'}"
    monkeypatch.setattr(Config, "DATABASE_URL", database_url)

    result = runner.invoke(cli, ["init-db"], obj={})

    assert result.exit_code == 0
    assert SqlStore(database_url).count("product") == 0


def test_create_product_terms_store_failure_exit_code(runner, cli_obj, wire_terms, store):
    """Test that a storage failure aborts term creation with its own exit code."""
    wire_terms({None: [("t1", "Chair")]})

    def failing_create(*args, **kwargs):
        raise StoreError("Database error: disk I/O error")

    store.create_term = failing_create

    result = runner.invoke(cli, ["create-product-terms", "type"], obj=cli_obj)

    assert result.exit_code == 3
    assert "Local store failure: Database error: disk I/O error" in result.output


def test_sync_products_store_failure_exit_code(runner, cli_obj, wire_catalog, make_item, store):
    """Test that a storage failure during product sync is not reported as partial."""
    wire_catalog([make_item("p1"), make_item("p2")])

    def failing_create(fields):
        raise StoreError("Database error: database is locked")

    store.create_product = failing_create

    result = runner.invoke(cli, ["sync-products"], obj=cli_obj)

    # Storage failures exit with 3, partial remote failures with 1
    assert result.exit_code == 3
    assert "database is locked" in result.output
