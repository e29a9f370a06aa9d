# tests/test_models.py
from rateorant.models import (
    Category,
    Identity,
    Notification,
    RatingAggregate,
    Restaurant,
    Review,
    id_key,
    parse_items,
)


class TestRatingAggregate:
    def test_no_reviews_is_zero_not_nan(self):
        aggregate = RatingAggregate.from_ratings([])
        assert aggregate.total == 0
        assert aggregate.count == 0
        assert aggregate.average == 0.0
        assert aggregate.stars == ""
        assert aggregate.label == "0 reviews"

    def test_average_and_stars(self):
        aggregate = RatingAggregate.from_ratings([5, 3, 4])
        assert (aggregate.total, aggregate.count) == (12, 3)
        assert aggregate.average == 4.0
        assert aggregate.stars == "⭐" * 4

    def test_average_rounds_to_one_decimal(self):
        assert RatingAggregate.from_ratings([4, 4, 5]).average == 4.3
        assert RatingAggregate.from_ratings([5, 5, 4]).average == 4.7

    def test_half_rounds_up(self):
        assert RatingAggregate.from_ratings([3, 4, 4, 4]).average == 3.8
        assert RatingAggregate.from_ratings([1, 2]).stars == "⭐⭐"
        assert RatingAggregate.from_ratings([4, 5]).stars == "⭐" * 5

    def test_label_singular(self):
        assert RatingAggregate.from_ratings([2]).label == "1 review"


def test_id_key_normalizes_numbers_and_strings():
    assert id_key(7) == id_key("7") == "7"
    assert id_key(None) == ""


def test_identity_same_id_is_type_tolerant():
    identity = Identity(id="7", username="olivia", role="restaurant_owner")
    assert identity.same_id(7)
    assert not identity.same_id(70)
    assert identity.is_owner


def test_identity_unknown_role_is_not_owner():
    assert not Identity(id=1, role="admin").is_owner


def test_parse_items_skips_malformed():
    reviews = parse_items(Review, [
        {"id": 1, "rating": 5},
        {"id": 2, "rating": 9},
        {"rating": 3},
        {"id": 4, "rating": 1, "comment": "cold"},
    ])
    assert [r.id for r in reviews] == [1, 4]


def test_restaurant_defaults_and_nested_categories():
    restaurant = Restaurant.model_validate({
        "id": 3,
        "name": "Sushi Bar",
        "owner_id": 7,
        "categories": [{"id": 2, "category": "Japanese"}],
        "unknown_field": True,
    })
    assert restaurant.description == ""
    assert restaurant.categories == [Category(id=2, category="Japanese")]


def test_notification_defaults_to_unread():
    notification = Notification.model_validate({"id": 5, "message": "New review"})
    assert notification.read is False
    assert notification.restaurant_id is None
