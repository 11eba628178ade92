"""
Tests for taxonomy term synchronization.
"""

import pytest
from catalog_sync.adapters.base import VOCABULARY_CATEGORY, VOCABULARY_TYPE
from catalog_sync.clients.records import DecodeError, NetworkError
from catalog_sync.services.taxonomy_sync import TaxonomySyncEngine, UnrecognizedKind


CATEGORY_TREE = {
    None: [("c1", "Furniture"), ("c2", "Lighting")],
    "c1": [("c11", "Chairs"), ("c12", "Tables")],
    "c11": [("c111", "Office chairs")],
}
TOTAL_CATEGORIES = sum(len(children) for children in CATEGORY_TREE.values())


@pytest.fixture
def engine(mock_catalog_client, store):
    return TaxonomySyncEngine(mock_catalog_client, store)


def test_categories_build_full_hierarchy(engine, wire_terms, store):
    """Test category hierarchy creation."""
    wire_terms(CATEGORY_TREE)

    result = engine.run("category")

    assert result.status == "success"
    assert result.counters.terms_created == TOTAL_CATEGORIES == 5
    furniture = store.find_term(VOCABULARY_CATEGORY, "c1")
    chairs = store.find_term(VOCABULARY_CATEGORY, "c11")
    office = store.find_term(VOCABULARY_CATEGORY, "c111")
    assert furniture.parent_id is None
    assert store.find_term(VOCABULARY_CATEGORY, "c2").parent_id is None
    assert chairs.parent_id == furniture.id
    assert store.find_term(VOCABULARY_CATEGORY, "c12").parent_id == furniture.id
    assert office.parent_id == chairs.id


def test_parent_term_exists_before_child_is_created(engine, wire_terms, store):
    """Test creation order of nested terms."""
    wire_terms(CATEGORY_TREE)
    created_order = []
    original_create = store.create_term

    def tracking_create(name, vocabulary, external_id, parent_id=None):
        if parent_id is not None:
            assert parent_id in store.terms
        created_order.append(external_id)
        return original_create(name, vocabulary, external_id, parent_id)

    store.create_term = tracking_create

    engine.run("category")

    assert created_order.index("c1") < created_order.index("c11") < created_order.index("c111")


def test_two_top_level_categories_fetch_children_with_parent_filter(engine, wire_terms, mock_catalog_client):
    """Test child listing requests per category."""
    wire_terms({None: [("c1", "Furniture"), ("c2", "Lighting")]})

    result = engine.run("category")

    assert result.counters.terms_created == 2
    requested_parents = [call.args[1] for call in mock_catalog_client.fetch_term_page.call_args_list]
    assert requested_parents == [None, "c1", "c2"]


def test_types_are_flat(engine, wire_terms, store, mock_catalog_client):
    """Test flat product types."""
    wire_terms({None: [("t1", "Chair"), ("t2", "Lamp")]})

    result = engine.run("type")

    assert result.counters.terms_created == 2
    assert mock_catalog_client.fetch_term_page.call_count == 1
    assert store.find_term(VOCABULARY_TYPE, "t1").parent_id is None
    assert result.message == "Total 2 product type taxonomy terms created."


def test_rerun_creates_nothing(engine, wire_terms, store):
    """Test repeated term sync."""
    wire_terms(CATEGORY_TREE)
    engine.run("category")

    result = engine.run("category")

    assert result.counters.terms_created == 0
    assert store.count("term") == TOTAL_CATEGORIES


def test_new_children_of_existing_terms_are_created(engine, wire_terms, store):
    """Test new subcategory under an existing category."""
    wire_terms({None: [("c1", "Furniture")]})
    engine.run("category")

    wire_terms({None: [("c1", "Furniture")], "c1": [("c11", "Chairs")]})
    result = engine.run("category")

    assert result.counters.terms_created == 1
    assert store.find_term(VOCABULARY_CATEGORY, "c11").parent_id == store.find_term(VOCABULARY_CATEGORY, "c1").id


def test_unknown_kind_fails_fast(engine, mock_catalog_client):
    """Test unknown term kind."""
    with pytest.raises(UnrecognizedKind):
        engine.run("brand")

    mock_catalog_client.fetch_term_page.assert_not_called()


def test_failed_branch_is_skipped_and_reported(engine, wire_terms, mock_catalog_client, store):
    """Test failed child listing."""
    wire_terms(CATEGORY_TREE)
    serve_tree = mock_catalog_client.fetch_term_page.side_effect

    def failing_for_c1(kind, parent_external_id=None):
        if parent_external_id == "c1":
            raise NetworkError("Catalog API GET /product-categories returned 500", status_code=500)
        return serve_tree(kind, parent_external_id)

    mock_catalog_client.fetch_term_page.side_effect = failing_for_c1

    result = engine.run("category")

    assert result.status == "partial"
    assert result.counters.terms_created == 2
    assert result.errors[0].external_id == "c1"
    assert store.find_term(VOCABULARY_CATEGORY, "c11") is None


def test_top_level_decode_error_creates_nothing(engine, mock_catalog_client, store):
    """Test invalid top level listing."""
    mock_catalog_client.fetch_term_page.side_effect = DecodeError("invalid JSON")

    result = engine.run("type")

    assert result.status == "partial"
    assert store.count("term") == 0
