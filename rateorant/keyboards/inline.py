# rateorant/keyboards/inline.py
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton
from typing import List, Optional

from ..controllers.dashboard import ALL, RATING_FLOORS, DashboardController
from ..controllers.detail import RestaurantDetailController
from ..controllers.form import RestaurantFormController
from ..models import Restaurant
from ..notifications import MAX_NOTIFICATIONS_SHOWN, NotificationIndicator


def nav(path: str) -> str:
    """Callback data that navigates to a client path"""
    return f"nav:{path}"


def get_landing_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🔑 Sign In", callback_data=nav("/sign-in"))],
        [
            InlineKeyboardButton(text="🙋 Sign Up", callback_data=nav("/sign-up")),
            InlineKeyboardButton(text="🏪 Owner Sign Up", callback_data=nav("/owner-sign-up"))
        ]
    ])


def get_back_keyboard(path: str = "/", text: str = "🔙 Back to Restaurants") -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=text, callback_data=nav(path))]
    ])


def get_cancel_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="❌ Cancel", callback_data="cancel")]
    ])


def get_dashboard_keyboard(
    controller: DashboardController,
    cards: List[Restaurant],
    page: int,
    total_pages: int,
    badge: str = ""
) -> InlineKeyboardMarkup:
    """Restaurant buttons, filters, pagination and account actions"""
    buttons = []

    for restaurant in cards:
        name = restaurant.name if len(restaurant.name) <= 28 else restaurant.name[:25] + "..."
        row = [InlineKeyboardButton(text=f"🍽️ {name}", callback_data=nav(f"/restaurant/{restaurant.id}"))]
        if controller.is_owner:
            row.append(InlineKeyboardButton(text="✏️", callback_data=nav(f"/edit-restaurant/{restaurant.id}")))
            row.append(InlineKeyboardButton(text="🗑️", callback_data=f"dash:del:{restaurant.id}"))
        elif controller.is_favorite(restaurant.id):
            row.append(InlineKeyboardButton(text="❤️", callback_data=f"fav:del:{restaurant.id}"))
        else:
            row.append(InlineKeyboardButton(text="🤍", callback_data=f"fav:add:{restaurant.id}"))
        buttons.append(row)

    if total_pages > 1:
        pagination_row = []
        if page > 0:
            pagination_row.append(InlineKeyboardButton(text="◀️ Back", callback_data=f"dash:page:{page - 1}"))
        pagination_row.append(InlineKeyboardButton(text=f"{page + 1}/{total_pages}", callback_data="current_page"))
        if page < total_pages - 1:
            pagination_row.append(InlineKeyboardButton(text="Next ▶️", callback_data=f"dash:page:{page + 1}"))
        buttons.append(pagination_row)

    filter_row = [
        InlineKeyboardButton(text="🏷️ Category", callback_data="dash:cats"),
        InlineKeyboardButton(text="⭐ Rating", callback_data="dash:floors"),
        InlineKeyboardButton(text="🔍 Search", callback_data="dash:search"),
    ]
    buttons.append(filter_row)

    extra_row = []
    if not controller.is_owner:
        label = "❤️ All restaurants" if controller.show_favorites_only else "🤍 Favorites only"
        extra_row.append(InlineKeyboardButton(text=label, callback_data="dash:favonly"))
    if (controller.search_query or controller.selected_rating_floor != ALL
            or controller.selected_category != ALL or controller.show_favorites_only):
        extra_row.append(InlineKeyboardButton(text="🧹 Clear filters", callback_data="dash:clear"))
    if extra_row:
        buttons.append(extra_row)

    if controller.is_owner:
        bell = f"🔔 {badge}" if badge else "🔔"
        buttons.append([
            InlineKeyboardButton(text="➕ Add New Restaurant", callback_data=nav("/add-restaurant")),
            InlineKeyboardButton(text=bell, callback_data="notif:toggle")
        ])

    buttons.append([
        InlineKeyboardButton(text="🔄 Refresh", callback_data="dash:refresh"),
        InlineKeyboardButton(text="🚪 Sign Out", callback_data="auth:signout")
    ])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def get_categories_keyboard(controller: DashboardController) -> InlineKeyboardMarkup:
    def mark(value: str) -> str:
        return "✅ " if controller.selected_category == value else ""

    buttons = [[InlineKeyboardButton(text=f"{mark(ALL)}All categories", callback_data=f"dash:cat:{ALL}")]]
    row = []
    for category in controller.categories:
        row.append(InlineKeyboardButton(
            text=f"{mark(str(category.id))}{category.category}",
            callback_data=f"dash:cat:{category.id}"
        ))
        if len(row) == 2:
            buttons.append(row)
            row = []
    if row:
        buttons.append(row)
    buttons.append([InlineKeyboardButton(text="🔙 Back", callback_data="dash:show")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def get_rating_floor_keyboard(controller: DashboardController) -> InlineKeyboardMarkup:
    def mark(value) -> str:
        return "✅ " if controller.selected_rating_floor == value else ""

    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=f"{mark(ALL)}Any rating", callback_data=f"dash:floor:{ALL}")],
        [
            InlineKeyboardButton(text=f"{mark(floor)}{floor}+ ⭐", callback_data=f"dash:floor:{floor}")
            for floor in RATING_FLOORS
        ],
        [InlineKeyboardButton(text="🔙 Back", callback_data="dash:show")]
    ])


def get_confirm_delete_keyboard(restaurant_id) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="✅ Yes, delete", callback_data=f"dash:del_ok:{restaurant_id}")],
        [InlineKeyboardButton(text="❌ No, keep it", callback_data="dash:show")]
    ])


def get_restaurant_keyboard(detail: RestaurantDetailController) -> InlineKeyboardMarkup:
    buttons = []
    restaurant_id = detail.restaurant_id

    if detail.is_owner:
        buttons.append([
            InlineKeyboardButton(text="✏️ Edit", callback_data=nav(f"/edit-restaurant/{restaurant_id}"))
        ])
    elif detail.session.is_authenticated:
        buttons.append([
            InlineKeyboardButton(text="✍️ Leave a review", callback_data=f"review:start:{restaurant_id}")
        ])
        for review in detail.reviews:
            if detail.can_delete(review):
                buttons.append([InlineKeyboardButton(
                    text=f"🗑️ Delete my {review.rating}⭐ review",
                    callback_data=f"review:del:{restaurant_id}:{review.id}"
                )])

    buttons.append([InlineKeyboardButton(text="🔙 Back to Restaurants", callback_data=nav("/"))])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def get_rating_keyboard() -> InlineKeyboardMarkup:
    """Rating 1–5"""
    return InlineKeyboardMarkup(inline_keyboard=[
        [
            InlineKeyboardButton(text="⭐ 1", callback_data="rate:1"),
            InlineKeyboardButton(text="⭐⭐ 2", callback_data="rate:2"),
            InlineKeyboardButton(text="⭐⭐⭐ 3", callback_data="rate:3"),
            InlineKeyboardButton(text="⭐⭐⭐⭐ 4", callback_data="rate:4"),
            InlineKeyboardButton(text="⭐⭐⭐⭐⭐ 5", callback_data="rate:5"),
        ],
        [InlineKeyboardButton(text="❌ Cancel", callback_data="cancel")]
    ])


def get_skip_keyboard(callback_data: str = "skip") -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="⏭ Skip", callback_data=callback_data)],
        [InlineKeyboardButton(text="❌ Cancel", callback_data="cancel")]
    ])


def get_form_categories_keyboard(form: RestaurantFormController) -> InlineKeyboardMarkup:
    buttons = []
    row = []
    for category in form.categories:
        mark = "✅" if form.is_selected(category.id) else "▫️"
        row.append(InlineKeyboardButton(
            text=f"{mark} {category.category}",
            callback_data=f"form:cat:{category.id}"
        ))
        if len(row) == 2:
            buttons.append(row)
            row = []
    if row:
        buttons.append(row)

    save_text = "✏️ Update Restaurant" if form.is_edit else "➕ Add Restaurant"
    if form.submitting:
        save_text = "⏳ Saving..."
    buttons.append([InlineKeyboardButton(text=save_text, callback_data="form:save")])
    buttons.append([InlineKeyboardButton(text="❌ Cancel", callback_data="cancel")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def get_notifications_keyboard(indicator: NotificationIndicator) -> InlineKeyboardMarkup:
    buttons = []
    for notification in indicator.notifications[:MAX_NOTIFICATIONS_SHOWN]:
        message = notification.message or "New review"
        text = message if len(message) <= 40 else message[:37] + "..."
        prefix = "" if notification.read else "🔵 "
        buttons.append([InlineKeyboardButton(
            text=f"{prefix}{text}",
            callback_data=f"notif:go:{notification.id}"
        )])

    footer = []
    if indicator.notifications:
        footer.append(InlineKeyboardButton(text="🧹 Clear", callback_data="notif:clear"))
    footer.append(InlineKeyboardButton(text="✖️ Close", callback_data="notif:close"))
    buttons.append(footer)
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def get_optional_keyboard(current: Optional[str]) -> Optional[InlineKeyboardMarkup]:
    """Keep-current button for edit steps"""
    if current:
        return InlineKeyboardMarkup(inline_keyboard=[
            [InlineKeyboardButton(text="↩️ Keep current", callback_data="form:keep")],
            [InlineKeyboardButton(text="❌ Cancel", callback_data="cancel")]
        ])
    return get_skip_keyboard("form:keep")
