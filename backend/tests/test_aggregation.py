"""Tests for rating aggregation: rounding, recompute and breakdown."""
import pytest
from sqlalchemy.exc import OperationalError

from productreview.aggregation import AggregationEngine, RatingStats, compute_stats, round_rating
from productreview.exceptions import NotFoundError, StorageError
from productreview.product_models import Product
from productreview.review_repository import ReviewRepository


@pytest.mark.parametrize("ratings, expected", [
    ([5, 5, 5, 4], RatingStats(4, 4.8)),
    ([1, 1, 1, 1, 5], RatingStats(5, 1.8)),
    ([3, 3], RatingStats(2, 3.0)),
    ([], RatingStats(0, 0.0)),
    ([4] * 19 + [5], RatingStats(20, 4.1)),  # mean 4.05
])
def test_compute_stats_rounds_half_away_from_zero(ratings, expected):
    assert compute_stats(ratings) == expected


def test_round_rating_is_not_bankers_rounding():
    assert round_rating(4.05) == 4.1
    assert round_rating(2.25) == 2.3
    assert round_rating(4.75) == 4.8
    assert round_rating(4.04) == 4.0


def test_zero_state(db, product):
    engine = AggregationEngine(db)
    assert engine.recompute_stats(product.id) == RatingStats(0, 0.0)
    assert engine.rating_breakdown(product.id) == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


def test_recompute_is_idempotent(db, catalog, product):
    for rating in (5, 4, 4, 2):
        catalog.submit_review(product.id, "Reviewer", "Solid purchase overall", rating)

    engine = AggregationEngine(db)
    first = engine.recompute_stats(product.id)
    db.commit()
    second = engine.recompute_stats(product.id)
    db.commit()

    assert first == second == RatingStats(4, 3.8)
    stored = db.query(Product).filter(Product.id == product.id).one()
    assert (stored.review_count, stored.average_rating) == (4, 3.8)


def test_recompute_corrects_drifted_stats(db, catalog, product):
    catalog.submit_review(product.id, "Reviewer", "Exactly what I wanted", 5)
    stored = db.query(Product).filter(Product.id == product.id).one()
    stored.review_count = 42
    stored.average_rating = 1.0
    db.commit()

    assert catalog.recompute_stats(product.id).review_count == 1
    assert catalog.get_product(product.id).average_rating == 5.0


def test_breakdown_is_complete_and_sums_to_review_count(db, catalog, product):
    for rating in (5, 5, 3, 1):
        catalog.submit_review(product.id, None, "Some thoughts on this", rating)

    breakdown = AggregationEngine(db).rating_breakdown(product.id)

    assert breakdown == {1: 1, 2: 0, 3: 1, 4: 0, 5: 2}
    assert sum(breakdown.values()) == catalog.get_product(product.id).review_count


def test_recompute_unknown_product(db):
    with pytest.raises(NotFoundError):
        AggregationEngine(db).recompute_stats(9999)


def test_recompute_storage_failure_raises_storage_error(db, product, monkeypatch):
    def unreachable(self, product_id):
        raise OperationalError("SELECT reviews", {}, Exception("unable to open database file"))

    monkeypatch.setattr(ReviewRepository, "find_by_product", unreachable)

    with pytest.raises(StorageError) as excinfo:
        AggregationEngine(db).recompute_stats(product.id)
    assert excinfo.value.status_code == 500
    assert excinfo.value.details["error_type"] == "OperationalError"
