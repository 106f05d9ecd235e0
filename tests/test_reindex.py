# tests/test_reindex.py

"""Tests for the batch re-index script."""

from catalog_search.reindex import _build_parser, run


def test_indexes_every_product(db, service, client, catalog):
    failures = run(db, service, "DEFAULT")

    assert failures == 0
    assert sorted(client.documents) == sorted(
        [("en", catalog["P"]), ("fr", catalog["P"]), ("en", catalog["Q"])]
    )


def test_only_selected_products(db, service, client, catalog):
    run(db, service, "DEFAULT", product_ids=[catalog["Q"]])
    assert list(client.documents) == [("en", catalog["Q"])]


def test_delete_mode(db, service, client, catalog):
    run(db, service, "DEFAULT")
    assert run(db, service, "DEFAULT", delete=True) == 0
    assert client.documents == {}


def test_failures_are_counted_and_do_not_stop_the_run(db, service, client, catalog, product_p):
    product_p.price = None

    failures = run(db, service, "DEFAULT", product_ids=[catalog["P"], 9999, catalog["Q"]])

    assert failures == 2
    assert ("en", catalog["Q"]) in client.documents


def test_unknown_store(db, service):
    assert run(db, service, "NOPE") == 1


def test_command_line_options():
    args = _build_parser().parse_args(["DEFAULT", "--delete", "--product", "3", "--product", "4"])
    assert args.store == "DEFAULT"
    assert args.delete is True
    assert args.product_ids == [3, 4]
