# tests/test_keyboards.py
from rateorant.controllers.dashboard import DashboardController
from rateorant.controllers.form import RestaurantFormController
from rateorant.keyboards.inline import (
    get_dashboard_keyboard,
    get_form_categories_keyboard,
    get_notifications_keyboard,
    get_rating_floor_keyboard,
)
from rateorant.models import Category, Notification, Restaurant
from rateorant.notifications import NotificationIndicator


def callbacks(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def texts(markup):
    return [button.text for row in markup.inline_keyboard for button in row]


def test_user_dashboard_buttons(client, user_session):
    controller = DashboardController(client, user_session)
    controller.favorites = {"2"}
    cards = [Restaurant(id=1, name="Italian Corner"), Restaurant(id=2, name="Pasta Place")]

    data = callbacks(get_dashboard_keyboard(controller, cards, 0, 1))

    assert "nav:/restaurant/1" in data
    assert "fav:add:1" in data
    assert "fav:del:2" in data
    assert "nav:/add-restaurant" not in data
    assert "dash:favonly" in data
    assert "auth:signout" in data


def test_owner_dashboard_buttons(client, owner_session):
    controller = DashboardController(client, owner_session, role="owner")
    cards = [Restaurant(id=3, name="Sushi Bar", owner_id=7)]

    markup = get_dashboard_keyboard(controller, cards, 0, 1, badge="9+")
    data = callbacks(markup)

    assert "nav:/edit-restaurant/3" in data
    assert "dash:del:3" in data
    assert "nav:/add-restaurant" in data
    assert not any(d.startswith("fav:") for d in data)
    assert "🔔 9+" in texts(markup)


def test_pagination_row(client, user_session):
    controller = DashboardController(client, user_session)
    data = callbacks(get_dashboard_keyboard(controller, [], 1, 3))
    assert "dash:page:0" in data
    assert "dash:page:2" in data


def test_clear_filters_only_when_filtering(client, user_session):
    controller = DashboardController(client, user_session)
    assert "dash:clear" not in callbacks(get_dashboard_keyboard(controller, [], 0, 1))
    controller.set_search("sushi")
    assert "dash:clear" in callbacks(get_dashboard_keyboard(controller, [], 0, 1))


def test_rating_floor_marks_selection(client, user_session):
    controller = DashboardController(client, user_session)
    controller.set_rating_floor(3)
    markup = get_rating_floor_keyboard(controller)
    assert "✅ 3+ ⭐" in texts(markup)
    assert callbacks(markup)[:5] == ["dash:floor:all", "dash:floor:1", "dash:floor:2", "dash:floor:3", "dash:floor:4"]


def test_form_categories(client, owner_session):
    form = RestaurantFormController(client, owner_session, restaurant_id=3)
    form.categories = [Category(id=1, category="Italian"), Category(id=2, category="Japanese")]
    form.toggle_category(2)

    markup = get_form_categories_keyboard(form)

    assert "▫️ Italian" in texts(markup)
    assert "✅ Japanese" in texts(markup)
    assert "✏️ Update Restaurant" in texts(markup)
    assert "form:save" in callbacks(markup)


def test_notifications_keyboard(client, owner_session):
    indicator = NotificationIndicator(client, owner_session)
    indicator.notifications = [
        Notification(id=5, message="New review on Italian Corner", restaurant_id=1),
        Notification(id=6, message="Older", restaurant_id=3, read=True),
    ]

    markup = get_notifications_keyboard(indicator)

    assert callbacks(markup) == ["notif:go:5", "notif:go:6", "notif:clear", "notif:close"]
    assert texts(markup)[0].startswith("🔵 ")
    assert texts(markup)[1] == "Older"
