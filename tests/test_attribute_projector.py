"""
Tests for attribute projection onto local product fields.
"""

import pytest
from catalog_sync.adapters.base import VOCABULARY_CATEGORY, VOCABULARY_TYPE
from catalog_sync.clients.records import RemoteAttribute
from catalog_sync.services.attribute_projector import AttributeProjector


@pytest.fixture
def projector(store):
    return AttributeProjector(store, asset_bundle="image_asset")


def test_base_fields_are_copied(projector, make_item):
    """Test that title, ids and timestamps are copied from the item."""
    item = make_item("p1", name="Oak Chair")

    fields = projector.project(item)

    assert fields.title == "Oak Chair"
    assert fields.external_id == "p1"
    assert fields.sku == "SKU-p1"
    assert fields.color is None
    assert fields.description is None
    assert fields.asset_ids == []


def test_color_takes_first_value(projector, make_item, color_attribute):
    """Test that color uses the first attribute value."""
    fields = projector.project(make_item("p1", attributes=[color_attribute]))

    assert fields.color == "Red"


def test_color_without_values_is_empty_string(projector, make_item):
    """Test color attribute without values."""
    attribute = RemoteAttribute(type="text", name="Color", group_name="Specifications", values=[])

    fields = projector.project(make_item("p1", attributes=[attribute]))

    assert fields.color == ""


def test_description_is_full_html_rich_text(projector, make_item, description_attribute):
    """Test description projection as full_html rich text."""
    fields = projector.project(make_item("p1", attributes=[description_attribute]))

    assert fields.description.value == "<p>x</p>"
    assert fields.description.format == "full_html"


def test_attribute_triple_must_match_exactly(projector, make_item):
    """Test that type, name and group must all match."""
    attributes = [
        RemoteAttribute(type="text", name="Color", group_name="General", values=["Green"]),
        RemoteAttribute(type="text", name="Description", group_name="General", values=["plain"]),
        RemoteAttribute(type="number", name="Weight", group_name="Specifications", values=[3]),
    ]

    fields = projector.project(make_item("p1", attributes=attributes))

    assert fields.color is None
    assert fields.description is None


def test_assets_are_shared_between_products(projector, store, make_item):
    """Test that one asset id maps to one local asset."""
    first = make_item("p1", attributes=[RemoteAttribute("asset", "Images", "Media", ["A1", "A2"])])
    second = make_item("p2", attributes=[RemoteAttribute("asset", "Gallery", "Media", ["A1"])])

    first_fields = projector.project(first)
    second_fields = projector.project(second)

    assert second_fields.asset_ids == [first_fields.asset_ids[0]]
    assert store.count("asset") == 2
    assert store.find_asset("A1").bundle == "image_asset"


def test_asset_values_accept_objects_and_skip_duplicates(projector, store, make_item):
    """Test asset values given as objects and repeated ids."""
    attributes = [
        RemoteAttribute("asset", "Images", "Media", [{"asset_id": "A1"}, "A2"]),
        RemoteAttribute("asset", "Downloads", "Media", ["A2", {"id": "A3"}]),
    ]

    fields = projector.project(make_item("p1", attributes=attributes))

    assert [store.assets[i].external_id for i in fields.asset_ids] == ["A1", "A2", "A3"]


def test_categories_resolve_first_entry_and_sub_category(projector, store, make_item):
    """Test category resolution from the first category path."""
    top = store.create_term("Furniture", VOCABULARY_CATEGORY, "c1")
    sub = store.create_term("Chairs", VOCABULARY_CATEGORY, "c2", parent_id=top.id)
    store.create_term("Furniture type", VOCABULARY_TYPE, "t1")

    fields = projector.project(make_item("p1", type_id="t1", category="c1", sub_category="c2"))

    assert fields.category_term_ids == [top.id, sub.id]
    assert fields.type_term_id == store.find_term(VOCABULARY_TYPE, "t1").id


def test_missing_terms_are_not_created(projector, store, make_item):
    """Test that unknown type and category terms are skipped."""
    fields = projector.project(make_item("p1", type_id="t9", category="c9", sub_category="c10"))

    assert fields.category_term_ids == []
    assert fields.type_term_id is None
    assert store.count("term") == 0
