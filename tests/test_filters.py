from collections import Counter

from ecwid_reco.domain.services.filters import (
    count_appearances,
    count_co_occurrences,
    fill_to_capacity,
    find_most_expensive,
    find_upsell_products,
    in_stock,
    rank_by_frequency,
    shares_category,
)
from mocks import order, product


def test_in_stock_treats_unknown_as_unavailable():
    assert in_stock(product("a", 1, stock=3))
    assert not in_stock(product("a", 1, stock=0))
    assert not in_stock(product("a", 1, stock=None))


def test_shares_category_is_exact():
    p = product("a", 1, ["21", "3"])
    assert shares_category(p, frozenset(["3"]))
    assert not shares_category(p, frozenset(["1"]))
    assert not shares_category(p, frozenset())


def test_co_occurrences_count_every_line():
    orders = [order("o1", "S", "A", "A"), order("o2", "A", "S"), order("o3", "A", "B")]
    assert count_co_occurrences(orders, "S") == Counter({"A": 3})


def test_appearances_and_stable_ranking():
    counts = count_appearances([order("o1", "x", "y"), order("o2", "y", "z", "z", "z"), order("o3", "x")])
    assert counts == Counter({"z": 3, "x": 2, "y": 2})
    assert rank_by_frequency(counts) == ["z", "x", "y"]
    assert rank_by_frequency(counts, allowed={"x", "y"}) == ["x", "y"]


def test_upsell_requires_markup_and_excludes():
    src = product("S", 20, ["1"])
    products = [
        src,
        product("a", 23.99, ["1"]),
        product("b", 24.5, ["1"]),
        product("c", 30, ["1"]),
        product("d", 28, ["1"]),
    ]
    assert find_upsell_products(src, products) == ["b", "d", "c"]
    assert find_upsell_products(src, products, exclude=["d"]) == ["b", "c"]
    assert find_upsell_products(src, products, limit=1) == ["b"]


def test_upsell_needs_price_and_categories():
    products = [product("a", 100, ["1"])]
    assert find_upsell_products(product("S", None, ["1"]), products) == []
    assert find_upsell_products(product("S", 0, ["1"]), products) == []
    assert find_upsell_products(product("S", 10, []), products) == []


def test_most_expensive_scoping():
    products = [
        product("a", 10, ["1"]),
        product("b", 70, ["2"]),
        product("c", 40, ["1"]),
        product("d", None, ["1"]),
        product("e", 99, ["1"], stock=0),
    ]
    assert find_most_expensive(products) == ["b", "c", "a"]
    assert find_most_expensive(products, categories=frozenset(["1"])) == ["c", "a"]
    assert find_most_expensive(products, categories=frozenset()) == []
    assert find_most_expensive(products, exclude=["b"], limit=2) == ["c", "a"]


def test_fill_to_capacity_skips_chosen():
    chosen = ["a"]
    added = fill_to_capacity(chosen, ["a", "b", "c", "d"])
    assert added == 2
    assert chosen == ["a", "b", "c"]
