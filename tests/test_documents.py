# tests/test_documents.py

"""Tests for index document assembly."""

import pytest

from catalog_search.documents import primary_category, select_image
from catalog_search.exceptions import DocumentBuildError, IndexingError
from catalog_search.models import Category, Product, ProductDescription, ProductImage


def _description(product, language):
    return next(d for d in product.descriptions if d.language.code == language)


def test_english_document(assembler, store, product_p):
    item = assembler.build(store, product_p, _description(product_p, "en"))

    assert item.id == product_p.id
    assert item.store == "default"
    assert item.language == "en"
    assert item.name == "Trail runner shoe"
    assert item.description == "Light & fast"
    assert item.link == "trail-runner"
    assert item.brand == "Acme"
    assert item.category == "Shoes"
    assert item.attributes == {"Color": "Red", "Size": "l"}
    assert item.image == "img1.png"
    assert item.reviews == "4.50"
    assert item.keywords == ["trail", "runner", "shoe"]


def test_inventory_has_base_product_and_each_variant(assembler, store, product_p):
    item = assembler.build(store, product_p, _description(product_p, "en"))

    assert [e.sku for e in item.inventory] == ["P", "P-RED"]
    assert item.inventory[0].quantity == 10
    assert item.inventory[0].price == "USD 100.00"
    assert item.inventory[0].discount_price == "USD 80.00"
    assert item.inventory[1].quantity == 3


def test_french_document_uses_french_names(assembler, store, product_p):
    item = assembler.build(store, product_p, _description(product_p, "fr"))

    assert item.language == "fr"
    assert item.name == "Chaussure de trail"
    assert item.category == "Chaussures"
    assert item.attributes == {"Couleur": "Rouge", "Size": "l"}
    assert item.link == "chaussure-trail"


def test_variants_attached_only_when_given(assembler, store, product_p):
    description = _description(product_p, "en")
    assert assembler.build(store, product_p, description).variants is None

    variants = [{"color": "red", "vsku": "P-RED"}]
    assert assembler.build(store, product_p, description, variants).variants == variants


def test_bare_product_has_no_optional_fields(assembler, store, product_q):
    item = assembler.build(store, product_q, product_q.descriptions[0])

    assert len(item.inventory) == 1
    assert item.attributes is None
    assert item.brand is None
    assert item.category is None
    assert item.image is None
    assert item.reviews is None
    assert item.description == ""
    assert "attributes" not in item.to_metadata()


def test_missing_manufacturer_name_leaves_brand_empty(assembler, store, product_p):
    product_p.manufacturer.descriptions.clear()
    item = assembler.build(store, product_p, _description(product_p, "fr"))
    assert item.brand is None


def test_build_failure_is_wrapped(assembler, store, product_q):
    product_q.price = None
    with pytest.raises(DocumentBuildError) as err:
        assembler.build(store, product_q, product_q.descriptions[0])
    assert err.value.language == "en"
    assert err.value.product_id == product_q.id


def test_index_document_submits_to_client(assembler, client, store, product_q):
    item = assembler.index_document(store, product_q, product_q.descriptions[0])
    assert client.documents[("en", product_q.id)] == item


def test_index_document_wraps_backend_failure(assembler, client, store, product_q):
    client.fail_index_language = "en"
    with pytest.raises(IndexingError):
        assembler.index_document(store, product_q, product_q.descriptions[0])


def test_select_image_prefers_default():
    product = Product(images=[ProductImage(id=1, image_name="a.png"),
                              ProductImage(id=2, image_name="b.png", default_image=True)])
    assert select_image(product).image_name == "b.png"


def test_select_image_falls_back_to_first():
    product = Product(images=[ProductImage(id=7, image_name="late.png"),
                              ProductImage(id=3, image_name="early.png")])
    assert select_image(product).image_name == "early.png"


def test_select_image_none():
    assert select_image(Product()) is None


def test_primary_category_is_deterministic():
    product = Product(categories=[Category(id=9, code="b", sort_order=2),
                                  Category(id=4, code="a", sort_order=2),
                                  Category(id=1, code="c", sort_order=3)])
    assert primary_category(product).code == "a"


def test_description_without_language_is_wrapped(assembler, store, product_q):
    orphan = ProductDescription(name="Orphan", language=None)
    with pytest.raises(DocumentBuildError) as err:
        assembler.build(store, product_q, orphan)
    assert err.value.language is None
