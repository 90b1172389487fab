from collections import Counter
from typing import Iterable, List, Optional

from ecwid_reco.domain.models.catalog import Order, Product
from ecwid_reco.domain.services.constants import (
    MAX_RECOMMENDATIONS,
    MIN_PRICE_DIFFERENCE,
    UPSELL_PRICE_MULTIPLIER,
)


def in_stock(p: Product) -> bool:
    # Unknown stock is treated like sold out: never offered as a target
    return p.stock is not None and p.stock > 0


def is_priced(p: Product) -> bool:
    return p.price is not None and p.price > 0


def shares_category(p: Product, categories: frozenset) -> bool:
    """True if `p` belongs to at least one of `categories` (exact id membership)."""
    return bool(categories) and not categories.isdisjoint(p.category_ids)


def _unique(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


def count_co_occurrences(orders: Iterable[Order], source_product_id: str) -> Counter:
    """
    Tally, over every order containing the source product, each other line of
    that order. Order ids hold one entry per line item, so a product bought in
    two variants counts twice.
    """
    counts: Counter = Counter()
    for order in orders:
        if source_product_id not in order.product_ids:
            continue
        counts.update(pid for pid in order.product_ids if pid != source_product_id)
    return counts


def count_appearances(orders: Iterable[Order]) -> Counter:
    """Store-wide purchase frequency: every line of every order counts."""
    counts: Counter = Counter()
    for order in orders:
        counts.update(order.product_ids)
    return counts


def rank_by_frequency(counts: Counter, allowed: Optional[set] = None) -> List[str]:
    """
    Ids by descending count. Ties keep first-seen order (most_common is a stable sort),
    so a run over the same data always ranks the same way.
    """
    return [pid for pid, _ in counts.most_common() if allowed is None or pid in allowed]


def find_upsell_products(
    source: Product,
    products: Iterable[Product],
    exclude: Iterable[str] = (),
    limit: int = MAX_RECOMMENDATIONS,
) -> List[str]:
    """
    Price-tier upsell: same category, at least UPSELL_PRICE_MULTIPLIER times the
    source price and more than MIN_PRICE_DIFFERENCE above it, in stock.
    Cheapest qualifying step up first.
    """
    if not is_priced(source) or not source.category_ids:
        return []

    min_price = source.price * UPSELL_PRICE_MULTIPLIER
    floor = source.price + MIN_PRICE_DIFFERENCE
    excluded = {source.product_id, *exclude}
    categories = source.category_set

    candidates = [
        p for p in products
        if p.product_id not in excluded
        and in_stock(p)
        and p.price is not None
        and p.price >= min_price
        and p.price > floor
        and shares_category(p, categories)
    ]
    candidates.sort(key=lambda p: p.price)
    return _unique(p.product_id for p in candidates)[:limit]


def find_most_expensive(
    products: Iterable[Product],
    *,
    categories: Optional[frozenset] = None,
    exclude: Iterable[str] = (),
    limit: int = MAX_RECOMMENDATIONS,
) -> List[str]:
    """
    Priced, in-stock products by descending price.
    categories=None means the whole store; an empty set matches nothing.
    """
    if categories is not None and not categories:
        return []
    excluded = set(exclude)
    candidates = [
        p for p in products
        if p.product_id not in excluded
        and in_stock(p)
        and is_priced(p)
        and (categories is None or shares_category(p, categories))
    ]
    candidates.sort(key=lambda p: p.price, reverse=True)
    return _unique(p.product_id for p in candidates)[:limit]


def fill_to_capacity(chosen: List[str], candidates: Iterable[str], capacity: int = MAX_RECOMMENDATIONS) -> int:
    """Append candidates not already chosen until `chosen` is full. Returns how many were added."""
    added = 0
    for pid in candidates:
        if len(chosen) >= capacity:
            break
        if pid in chosen:
            continue
        chosen.append(pid)
        added += 1
    return added
