# tests/test_formatting.py
from rateorant.controllers.dashboard import DashboardController
from rateorant.formatting import (
    dashboard_text,
    esc,
    notifications_text,
    restaurant_card,
    review_list_text,
)
from rateorant.models import Notification, RatingAggregate, Restaurant, Review
from rateorant.notifications import NotificationIndicator


def test_esc():
    assert esc("<b>Fish & Chips</b>") == "&lt;b&gt;Fish &amp; Chips&lt;/b&gt;"
    assert esc(None) == ""


def test_card_escapes_and_shows_rating(client, user_session):
    controller = DashboardController(client, user_session)
    controller.ratings = {"1": RatingAggregate.from_ratings([5, 3, 4])}
    restaurant = Restaurant(id=1, name="Fish & Chips <3", location="Pier 9")

    card = restaurant_card(1, restaurant, controller)

    assert "Fish &amp; Chips &lt;3" in card
    assert "⭐⭐⭐⭐ 3 reviews" in card
    assert "📍 Pier 9" in card


def test_unrated_card(client, user_session):
    controller = DashboardController(client, user_session)
    card = restaurant_card(2, Restaurant(id=2, name="New Place"), controller)
    assert "☆ 0 reviews" in card


def test_card_numbers_continue_across_pages(client, user_session):
    controller = DashboardController(client, user_session)
    controller.restaurants = [Restaurant(id=i, name=f"Place {i}") for i in range(1, 6)]

    cards, total = controller.page_of(page=1, page_size=2)
    text = dashboard_text(controller, cards, controller.page, total, page_size=2)

    assert "<b>3. Place 3</b>" in text
    assert "<b>4. Place 4</b>" in text
    assert "Page 2/3" in text


def test_empty_states(client, user_session, owner_session):
    user = DashboardController(client, user_session)
    assert "No restaurants available" in dashboard_text(user, [], 0, 1)

    user.restaurants = [Restaurant(id=1, name="Sushi Bar")]
    user.set_search("pizza")
    text = dashboard_text(user, user.visible_restaurants(), 0, 1)
    assert "No restaurants match your filters" in text
    assert "🔍 “pizza”" in text

    owner = DashboardController(client, owner_session, role="owner")
    assert "Create your first restaurant" in dashboard_text(owner, [], 0, 1)


def test_review_list_truncates():
    reviews = [Review(id=i, user_id=1, rating=4) for i in range(12)]
    text = review_list_text(reviews, {"1": "ursula"}, is_owner=False)
    assert text.count("ursula") == 10
    assert text.endswith("…and 2 more")


def test_review_list_empty():
    assert review_list_text([], {}, is_owner=False).endswith("Be the first to review this restaurant!")
    assert review_list_text([], {}, is_owner=True) == "No reviews yet."


def test_owner_sees_reviewer_ids():
    reviews = [Review(id=1, user_id=21, rating=2, comment="<cold>")]
    text = review_list_text(reviews, {}, is_owner=True)
    assert "User 21 (user id 21)" in text
    assert "&lt;cold&gt;" in text


def test_notifications_text(client, owner_session):
    indicator = NotificationIndicator(client, owner_session)
    assert "No notifications yet." in notifications_text(indicator)


def test_long_notification_list_fits_one_message(client, owner_session):
    indicator = NotificationIndicator(client, owner_session)
    indicator.notifications = [
        Notification(id=i, message=f"New 5⭐ review on Italian Corner #{i} " + "x" * 300, restaurant_id=1)
        for i in range(150)
    ]
    indicator.unread_count = 150

    text = notifications_text(indicator)

    assert len(text) <= 4096
    assert "…and 140 more" in text
    assert "#9 " in text
    assert "#10 " not in text
