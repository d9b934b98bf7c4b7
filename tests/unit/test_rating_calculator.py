"""Tests for rating arithmetic (rounding, summaries, product blend)."""

import pytest

from udhyogunity.application.services.rating_calculator import (
    RatingTally,
    blend_product_ratings,
    rating_value,
    review_stats_from,
    round_rating,
    summarize_reviews,
)
from udhyogunity.domain.entities import CatalogItem, Review


def _review(doc_id: str, rating, status: str = "active") -> Review:
    return Review.from_document(doc_id, {"rating": rating, "status": status})


def _product(doc_id: str, **data) -> CatalogItem:
    return CatalogItem.from_document(doc_id, data)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(4.25, 4.3), (3.75, 3.8), (4.333333, 4.3), (2.5, 2.5), (0.0, 0.0), (5.0, 5.0)],
)
def test_round_rating_rounds_half_up(value: float, expected: float) -> None:
    """Halves round away from zero, unlike round()."""
    assert round_rating(value) == expected


def test_rating_value_counts_only_non_zero_numbers() -> None:
    assert rating_value(4) == 4.0
    assert rating_value(3.5) == 3.5
    assert rating_value(0) is None
    assert rating_value(True) is None
    assert rating_value("4") is None
    assert rating_value(None) is None


def test_rating_tally_average_of_empty_is_zero() -> None:
    tally = RatingTally()
    assert tally.average == 0.0
    tally.add(4, weight=3)
    assert tally.total == 12
    assert tally.count == 3


def test_summarize_reviews_skips_unusable_ratings() -> None:
    """Zero, missing and string ratings are left out of both sum and histogram."""
    reviews = [_review("a", 5), _review("b", 4), _review("c", 0), _review("d", "5"), _review("e", None)]
    summary = summarize_reviews(reviews)
    assert summary.tally.count == 2
    assert summary.tally.total == 9
    assert summary.histogram == {1: 0, 2: 0, 3: 0, 4: 1, 5: 1}


def test_summarize_reviews_buckets_fractional_ratings_by_floor() -> None:
    summary = summarize_reviews([_review("a", 4.5), _review("b", 1)])
    assert summary.histogram[4] == 1
    assert summary.histogram[1] == 1


def test_summarize_reviews_includes_hidden_by_default() -> None:
    reviews = [_review("a", 5), _review("b", 1, status="hidden"), _review("c", 1, status="reported")]
    assert summarize_reviews(reviews).tally.count == 3
    assert summarize_reviews(reviews, exclude_hidden=True).tally.count == 1


def test_review_stats_from_summary() -> None:
    summary = summarize_reviews([_review("a", 5), _review("b", 4), _review("c", 4)])
    stats = review_stats_from(summary)
    assert stats.average_rating == 4.3
    assert stats.review_count == 3
    assert stats.rating_counts == {1: 0, 2: 0, 3: 0, 4: 2, 5: 1}
    assert stats.rating_percentages[4] == pytest.approx(66.666, rel=1e-3)
    assert stats.rating_percentages[1] == 0


def test_review_stats_from_empty_summary() -> None:
    stats = review_stats_from(summarize_reviews([]))
    assert stats.average_rating == 0.0
    assert stats.review_count == 0
    assert all(value == 0 for value in stats.rating_percentages.values())


def test_blend_merges_weighted_and_unweighted_products() -> None:
    """A rated product without reviewCount weighs one review in the same mean."""
    products = [
        _product("a", rating=4, reviewCount=2),
        _product("b", rating=5, reviewCount=0),
    ]
    assert blend_product_ratings(products) == (4.3, 3)


def test_blend_weighted_only() -> None:
    products = [_product("a", rating=4, reviewCount=2), _product("b", rating=3, reviewCount=1)]
    assert blend_product_ratings(products) == (3.7, 3)


def test_blend_unweighted_only() -> None:
    products = [_product("a", rating=4), _product("b", rating=5)]
    assert blend_product_ratings(products) == (4.5, 2)


def test_blend_ignores_unrated_products() -> None:
    products = [_product("a", rating=0, reviewCount=3), _product("b"), _product("c", rating="4")]
    assert blend_product_ratings(products) == (0.0, 0)
