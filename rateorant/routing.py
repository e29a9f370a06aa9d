# rateorant/routing.py
"""
Role-gated client routing.

Maps a requested path to the view it renders, or to a redirect when the
current identity may not see it. The decision is a pure function of the
identity and the path; nothing here talks to the backend.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
from urllib.parse import parse_qsl, urlsplit

from .models import Identity

SIGN_IN_PATH = "/sign-in"
LANDING_PATH = "/"


class Access(str, Enum):
    OPEN = "open"
    AUTH = "auth"      # any signed-in identity
    OWNER = "owner"    # restaurant owners only
    USER = "user"      # signed-in non-owners only


class RouteState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED_USER = "authenticated_user"
    AUTHENTICATED_OWNER = "authenticated_owner"


def route_state(identity: Optional[Identity]) -> RouteState:
    if identity is None:
        return RouteState.ANONYMOUS
    if identity.is_owner:
        return RouteState.AUTHENTICATED_OWNER
    return RouteState.AUTHENTICATED_USER


@dataclass
class Route:
    pattern: str
    view: str
    access: Access = Access.OPEN
    props: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        regex = re.sub(r":(\w+)", r"(?P<\1>[^/]+)", self.pattern)
        self._regex = re.compile(f"^{regex}$")

    def match(self, path: str) -> Optional[Dict[str, str]]:
        m = self._regex.match(path)
        return m.groupdict() if m else None


@dataclass
class RouteDecision:
    path: str
    view: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    redirect: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect is not None


ROUTES: List[Route] = [
    Route("/sign-up", "sign_up", props={"role": "user"}),
    Route("/sign-in", "sign_in"),
    Route("/owner-sign-up", "sign_up", props={"role": "restaurant_owner"}),
    Route("/restaurant/:restaurant_id", "restaurant_detail", Access.AUTH),
    Route("/add-restaurant", "restaurant_form", Access.OWNER),
    Route("/edit-restaurant/:restaurant_id", "restaurant_form", Access.OWNER),
]


def check_access(access: Access, identity: Optional[Identity]) -> Optional[str]:
    """Redirect target for a guarded route, or None when it may render."""
    if access == Access.OPEN:
        return None
    if identity is None:
        return SIGN_IN_PATH
    if access == Access.OWNER and not identity.is_owner:
        return LANDING_PATH
    if access == Access.USER and identity.is_owner:
        return LANDING_PATH
    return None


def home_view(identity: Optional[Identity]) -> str:
    state = route_state(identity)
    if state == RouteState.ANONYMOUS:
        return "landing"
    if state == RouteState.AUTHENTICATED_OWNER:
        return "dashboard_owner"
    return "dashboard_user"


def resolve(identity: Optional[Identity], path: str, routes: Optional[List[Route]] = None) -> RouteDecision:
    parts = urlsplit(path or LANDING_PATH)
    clean_path = parts.path.rstrip("/") or LANDING_PATH
    query = dict(parse_qsl(parts.query))
    decision = RouteDecision(path=clean_path, query=query)

    if clean_path == LANDING_PATH:
        decision.view = home_view(identity)
        return decision

    for route in routes if routes is not None else ROUTES:
        params = route.match(clean_path)
        if params is None:
            continue
        redirect = check_access(route.access, identity)
        if redirect is not None:
            decision.redirect = redirect
            return decision
        decision.view = route.view
        decision.params = {**route.props, **params}
        return decision

    decision.view = "not_found"
    return decision
