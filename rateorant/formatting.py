# rateorant/formatting.py
"""HTML text for the bot's views."""

import html
from typing import Dict, List, Optional

from .config import config
from .controllers.dashboard import ALL, DashboardController
from .controllers.detail import RestaurantDetailController
from .controllers.form import RestaurantFormController
from .models import Notification, Restaurant, Review
from .notifications import MAX_NOTIFICATIONS_SHOWN, NotificationIndicator

MAX_REVIEWS_SHOWN = 10
MAX_MESSAGE_CHARS = 200


def esc(text) -> str:
    return html.escape(str(text)) if text is not None else ""


def format_date(value) -> str:
    if value is None:
        return ""
    return value.strftime("%b %d, %Y %H:%M")


def landing_text() -> str:
    return (
        "🍽️ <b>Welcome to Rateorant!</b>\n\n"
        "Discover restaurants near you, save your favorites and share honest ratings.\n\n"
        "• 🔍 Browse and search restaurants\n"
        "• ⭐ Rate and comment on the places you visit\n"
        "• 🏪 Own a restaurant? List it and hear what diners think\n\n"
        "<b>Sign in or create an account to get started</b> 👇"
    )


def help_text() -> str:
    return (
        "📘 <b>Commands:</b>\n\n"
        "• /start — home screen\n"
        "• /search &lt;text&gt; — search restaurants by name or location\n"
        "• /notifications — new reviews on your restaurants (owners)\n"
        "• /signin — sign in\n"
        "• /signout — sign out\n"
        "• /cancel — cancel the current action"
    )


def filters_line(controller: DashboardController) -> str:
    parts = []
    if controller.selected_category != ALL:
        name = next(
            (c.category for c in controller.categories if str(c.id) == controller.selected_category),
            controller.selected_category
        )
        parts.append(f"🏷️ {esc(name)}")
    if controller.selected_rating_floor != ALL:
        parts.append(f"⭐ {controller.selected_rating_floor}+")
    if controller.search_query:
        parts.append(f"🔍 “{esc(controller.search_query)}”")
    if controller.show_favorites_only:
        parts.append("❤️ favorites")
    return " · ".join(parts)


def restaurant_card(index: int, restaurant: Restaurant, controller: DashboardController) -> str:
    rating = controller.rating_for(restaurant.id)
    stars = rating.stars or "☆"
    lines = [
        f"<b>{index}. {esc(restaurant.name)}</b>",
        f"{stars} {rating.label}",
    ]
    if restaurant.location:
        lines.append(f"📍 {esc(restaurant.location)}")
    if restaurant.description:
        description = restaurant.description
        if len(description) > 120:
            description = description[:117] + "..."
        lines.append(f"<i>{esc(description)}</i>")
    return "\n".join(lines)


def dashboard_text(
    controller: DashboardController,
    cards: List[Restaurant],
    page: int,
    total_pages: int,
    page_size: Optional[int] = None
) -> str:
    identity = controller.session.identity
    username = esc(identity.username if identity else "")
    if controller.is_owner:
        subtitle = "Manage and monitor your restaurant listings"
    else:
        subtitle = "Discover and rate the best restaurants in your area"

    text = f"👋 <b>Welcome back, {username}!</b>\n{subtitle}\n"

    if controller.error:
        text += f"\n⚠️ {esc(controller.error)}\n"

    filters = filters_line(controller)
    if filters:
        text += f"\n{filters}\n"

    if not cards:
        if controller.is_owner:
            text += "\n🏪 <b>No restaurants yet</b>\nCreate your first restaurant to get started."
        elif controller.restaurants:
            text += "\n🤷 <b>No restaurants match your filters.</b>"
        else:
            text += "\n🍽️ <b>No restaurants available</b>\nCheck back soon for new listings."
        return text

    start = page * (page_size or config.DASHBOARD_PAGE_SIZE)
    text += "\n" + "\n\n".join(
        restaurant_card(start + i + 1, r, controller) for i, r in enumerate(cards)
    )
    if total_pages > 1:
        text += f"\n\nPage {page + 1}/{total_pages}"
    return text


def restaurant_detail_text(detail: RestaurantDetailController) -> str:
    restaurant = detail.restaurant
    rating = detail.rating
    text = f"🍽️ <b>{esc(restaurant.name)}</b>\n"
    text += f"{rating.stars or '☆'} {rating.average:.1f} · {rating.label}\n"
    if restaurant.location:
        text += f"📍 {esc(restaurant.location)}\n"
    if restaurant.description:
        text += f"\n{esc(restaurant.description)}\n"
    if restaurant.categories:
        text += "\n🏷️ " + ", ".join(esc(c.category) for c in restaurant.categories) + "\n"
    if detail.is_favorite:
        text += "\n❤️ In your favorites\n"

    if detail.is_owner:
        text += (
            "\n👀 <b>You're viewing all customer comments for your restaurant.</b>\n"
            "Use this feedback to improve your restaurant experience.\n"
        )
    else:
        text += "\nSee what other diners think before leaving your own rating.\n"

    text += "\n💬 <b>Reviews</b>\n"
    text += review_list_text(detail.reviews, detail.reviewers, detail.is_owner)
    return text


def review_list_text(reviews: List[Review], reviewers: Dict[str, str], is_owner: bool) -> str:
    if not reviews:
        suffix = "" if is_owner else " Be the first to review this restaurant!"
        return f"No reviews yet.{suffix}"

    blocks = []
    for review in reviews[:MAX_REVIEWS_SHOWN]:
        author = reviewers.get(str(review.user_id)) or f"User {review.user_id}"
        block = f"{'★' * review.rating} {review.rating}/5 — {esc(author)}"
        if is_owner:
            block += f" (user id {review.user_id})"
        if review.created_at:
            block += f"\n🕒 {format_date(review.created_at)}"
        if review.comment:
            block += f"\n<i>{esc(review.comment)}</i>"
        blocks.append(block)
    hidden = len(reviews) - MAX_REVIEWS_SHOWN
    if hidden > 0:
        blocks.append(f"…and {hidden} more")
    return "\n\n".join(blocks)


def form_summary_text(form: RestaurantFormController) -> str:
    title = "✏️ <b>Edit Restaurant</b>" if form.is_edit else "➕ <b>Add New Restaurant</b>"
    values = form.form
    text = (
        f"{title}\n\n"
        f"<b>Name:</b> {esc(values['name']) or '—'}\n"
        f"<b>Location:</b> {esc(values['location']) or '—'}\n"
        f"<b>Description:</b> {esc(values['description']) or '—'}\n"
        f"<b>Image URL:</b> {esc(values['image_url']) or '—'}\n"
    )
    if form.categories:
        selected = [c.category for c in form.categories if form.is_selected(c.id)]
        text += f"<b>Categories:</b> {esc(', '.join(selected)) or '—'}\n"
        text += "\nTap categories to toggle them, then save."
    else:
        text += "\nNo categories available. Save to continue."
    if form.error:
        text += f"\n\n⚠️ {esc(form.error)}"
    return text


def notification_line(notification: Notification) -> str:
    marker = "▫️" if notification.read else "🔵"
    when = format_date(notification.created_at)
    message = notification.message or "New review"
    if len(message) > MAX_MESSAGE_CHARS:
        message = message[:MAX_MESSAGE_CHARS - 3] + "..."
    line = f"{marker} {esc(message)}"
    if when:
        line += f"\n     🕒 {when}"
    return line


def notifications_text(indicator: NotificationIndicator) -> str:
    if not indicator.notifications:
        return "🔔 <b>Notifications</b>\n\nNo notifications yet."
    header = "🔔 <b>Notifications</b>"
    if indicator.unread_count:
        header += f" ({indicator.unread_count} unread)"
    lines = [notification_line(n) for n in indicator.notifications[:MAX_NOTIFICATIONS_SHOWN]]
    hidden = len(indicator.notifications) - MAX_NOTIFICATIONS_SHOWN
    if hidden > 0:
        lines.append(f"…and {hidden} more")
    return header + "\n\n" + "\n".join(lines)
