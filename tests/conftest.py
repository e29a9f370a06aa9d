# tests/conftest.py
import asyncio
import base64
import json
from typing import Any, Dict, List, Optional, Tuple

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from rateorant.session import Session
from rateorant.services.users import user_cache
from rateorant.utils.http_client import HTTPClient


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def make_token(user_id: Any, username: str = "user", role: Optional[str] = "user", email: Optional[str] = None) -> str:
    """Three-part bearer token in the backend's shape; the signature is not checked."""
    payload = {"sub": user_id, "username": username}
    if email:
        payload["email"] = email
    if role is not None:
        payload["role"] = role
    header = _b64(json.dumps({"alg": "HS256", "typ": "JWT"}).encode())
    return f"{header}.{_b64(json.dumps(payload).encode())}.signature"


CATEGORIES = [
    {"id": 1, "category": "Italian"},
    {"id": 2, "category": "Japanese"},
]

USERS = {
    "7": {"id": 7, "username": "olivia", "role": "restaurant_owner"},
    "8": {"id": 8, "username": "oscar", "role": "restaurant_owner"},
    "20": {"id": 20, "username": "ursula", "role": "user"},
    "21": {"id": 21, "username": "umar", "role": "user"},
}


class MockBackend:
    """In-memory stand-in for the Rateorant REST API.

    Every request is recorded as (method, path_qs, Authorization). Tests
    can force a response for a path with ``overrides`` or slow one down
    with ``delays``; both are keyed by ``path_qs``.
    """

    def __init__(self):
        self.categories: List[Dict[str, Any]] = [dict(c) for c in CATEGORIES]
        self.restaurants: Dict[str, Dict[str, Any]] = {}
        self.reviews: Dict[str, List[Dict[str, Any]]] = {}
        self.favorites: Dict[str, List[str]] = {}
        self.notifications: List[Dict[str, Any]] = []
        self.users: Dict[str, Dict[str, Any]] = {k: dict(v) for k, v in USERS.items()}
        self.accounts: Dict[str, Tuple[str, Dict[str, Any]]] = {}
        self.requests: List[Tuple[str, str, Optional[str]]] = []
        self.overrides: Dict[str, Tuple[int, Any]] = {}
        self.delays: Dict[str, float] = {}
        self.base_url = ""
        self._next_id = 100

        self.app = web.Application(middlewares=[self.record])
        self.app.add_routes([
            web.get("/categories", self.list_categories),
            web.get("/categories/{category_id}/restaurants", self.category_restaurants),
            web.get("/restaurants", self.list_restaurants),
            web.post("/restaurants", self.create_restaurant),
            web.get("/restaurants/{rid}", self.get_restaurant),
            web.put("/restaurants/{rid}", self.update_restaurant),
            web.delete("/restaurants/{rid}", self.delete_restaurant),
            web.get("/restaurants/{rid}/reviews", self.list_reviews),
            web.post("/restaurants/{rid}/reviews", self.create_review),
            web.delete("/restaurants/{rid}/reviews/{review_id}", self.delete_review),
            web.get("/restaurants/{rid}/favorite", self.check_favorite),
            web.post("/restaurants/{rid}/favorite", self.add_favorite),
            web.delete("/restaurants/{rid}/favorite", self.remove_favorite),
            web.get("/favorites", self.list_favorites),
            web.get("/notifications", self.list_notifications),
            web.get("/users/{user_id}", self.get_user),
            web.post("/auth/sign-in", self.sign_in),
            web.post("/auth/sign-up", self.sign_up),
        ])

    # --- Test helpers ---

    def seed(self):
        self.add_restaurant(1, "Italian Corner", "Main St", owner_id=7, categories=[1])
        self.add_restaurant(2, "Pasta Place", "Italy Ave", owner_id=8, categories=[1])
        self.add_restaurant(3, "Sushi Bar", "Tokyo St", owner_id=7, categories=[2])
        self.add_review(1, 20, 5, "Great")
        self.add_review(1, 21, 3)
        self.add_review(1, 8, 4, "Solid")
        self.add_review(2, 20, 2, "Meh")
        return self

    def add_restaurant(self, rid, name, location, owner_id, categories=(), description=""):
        self.restaurants[str(rid)] = {
            "id": rid,
            "name": name,
            "description": description,
            "location": location,
            "image_url": None,
            "owner_id": owner_id,
            "category_ids": list(categories),
        }

    def add_review(self, rid, user_id, rating, comment=""):
        review = {
            "id": self._new_id(),
            "restaurant_id": rid,
            "user_id": user_id,
            "rating": rating,
            "comment": comment,
            "created_at": "2024-05-01T12:00:00",
        }
        self.reviews.setdefault(str(rid), []).append(review)
        return review

    def add_account(self, username, password, user_id, role="user"):
        self.accounts[username] = (password, {"id": user_id, "username": username, "role": role})

    def calls(self, method: Optional[str] = None, path: Optional[str] = None):
        return [
            r for r in self.requests
            if (method is None or r[0] == method) and (path is None or r[1] == path)
        ]

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _serialize(self, restaurant):
        body = {k: v for k, v in restaurant.items() if k != "category_ids"}
        body["categories"] = [c for c in self.categories if c["id"] in restaurant["category_ids"]]
        return body

    def _caller(self, request) -> Optional[Dict[str, Any]]:
        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Bearer "):
            return None
        segments = auth[len("Bearer "):].split(".")
        if len(segments) != 3:
            return None
        payload = segments[1] + "=" * (-len(segments[1]) % 4)
        try:
            return json.loads(base64.urlsafe_b64decode(payload))
        except ValueError:
            return None

    def _unauthorized(self):
        return web.json_response({"detail": "Not authenticated"}, status=401)

    # --- Middleware ---

    @web.middleware
    async def record(self, request, handler):
        self.requests.append((request.method, request.path_qs, request.headers.get("Authorization")))

        delay = self.delays.get(request.path_qs)
        if delay:
            await asyncio.sleep(delay)

        override = self.overrides.get(request.path_qs)
        if override is not None:
            status, body = override
            if isinstance(body, str):
                return web.Response(status=status, text=body)
            return web.json_response(body, status=status)

        return await handler(request)

    # --- Categories and restaurants ---

    async def list_categories(self, request):
        return web.json_response(self.categories)

    async def category_restaurants(self, request):
        cid = int(request.match_info["category_id"])
        matching = [self._serialize(r) for r in self.restaurants.values() if cid in r["category_ids"]]
        return web.json_response(matching)

    async def list_restaurants(self, request):
        cid = request.query.get("category_id") or request.query.get("category")
        restaurants = [self._serialize(r) for r in self.restaurants.values()]
        if cid:
            restaurants = [r for r in restaurants if any(str(c["id"]) == cid for c in r["categories"])]
            return web.json_response(restaurants)
        return web.json_response({"restaurants": restaurants})

    async def get_restaurant(self, request):
        restaurant = self.restaurants.get(request.match_info["rid"])
        if restaurant is None:
            return web.json_response({"detail": "Restaurant not found"}, status=404)
        return web.json_response(self._serialize(restaurant))

    async def create_restaurant(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        data = await request.json()
        rid = self._new_id()
        self.add_restaurant(
            rid, data["name"], data["location"], owner_id=caller["sub"],
            categories=data.get("category_ids", []), description=data.get("description", "")
        )
        return web.json_response(self._serialize(self.restaurants[str(rid)]), status=201)

    async def update_restaurant(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        restaurant = self.restaurants.get(request.match_info["rid"])
        if restaurant is None:
            return web.json_response({"detail": "Restaurant not found"}, status=404)
        data = await request.json()
        restaurant.update({k: v for k, v in data.items() if k in restaurant})
        return web.json_response(self._serialize(restaurant))

    async def delete_restaurant(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        restaurant = self.restaurants.get(request.match_info["rid"])
        if restaurant is None:
            return web.json_response({"detail": "Restaurant not found"}, status=404)
        if str(restaurant["owner_id"]) != str(caller["sub"]):
            return web.json_response({"detail": "Not your restaurant"}, status=403)
        del self.restaurants[request.match_info["rid"]]
        return web.Response(status=204)

    # --- Reviews ---

    async def list_reviews(self, request):
        return web.json_response(self.reviews.get(request.match_info["rid"], []))

    async def create_review(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        rid = request.match_info["rid"]
        if any(str(r["user_id"]) == str(caller["sub"]) for r in self.reviews.get(rid, [])):
            return web.json_response({"detail": "You have already reviewed this restaurant"}, status=400)
        data = await request.json()
        review = self.add_review(int(rid), caller["sub"], data["rating"], data.get("comment", ""))
        return web.json_response(review, status=201)

    async def delete_review(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        rid, review_id = request.match_info["rid"], request.match_info["review_id"]
        before = self.reviews.get(rid, [])
        self.reviews[rid] = [r for r in before if str(r["id"]) != review_id]
        if len(self.reviews[rid]) == len(before):
            return web.json_response({"detail": "Review not found"}, status=404)
        return web.Response(status=204)

    # --- Favorites ---

    async def list_favorites(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        ids = self.favorites.get(str(caller["sub"]), [])
        return web.json_response([{"restaurant_id": int(rid), "user_id": caller["sub"]} for rid in ids])

    async def check_favorite(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        ids = self.favorites.get(str(caller["sub"]), [])
        return web.json_response({"is_favorite": request.match_info["rid"] in ids})

    async def add_favorite(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        ids = self.favorites.setdefault(str(caller["sub"]), [])
        if request.match_info["rid"] not in ids:
            ids.append(request.match_info["rid"])
        return web.json_response({"message": "Added to favorites"}, status=201)

    async def remove_favorite(self, request):
        caller = self._caller(request)
        if caller is None:
            return self._unauthorized()
        ids = self.favorites.get(str(caller["sub"]), [])
        if request.match_info["rid"] in ids:
            ids.remove(request.match_info["rid"])
        return web.Response(status=204)

    # --- Notifications and users ---

    async def list_notifications(self, request):
        caller = self._caller(request)
        if caller is None or caller.get("role") != "restaurant_owner":
            return self._unauthorized()
        return web.json_response({"notifications": self.notifications})

    async def get_user(self, request):
        user = self.users.get(request.match_info["user_id"])
        if user is None:
            return web.json_response({"detail": "User not found"}, status=404)
        return web.json_response(user)

    # --- Auth ---

    async def sign_in(self, request):
        data = await request.json()
        account = self.accounts.get(data.get("username"))
        if account is None or account[0] != data.get("password"):
            return web.json_response({"detail": "Invalid username or password"}, status=401)
        user = account[1]
        return web.json_response({"token": make_token(user["id"], user["username"], user["role"])})

    async def sign_up(self, request):
        data = await request.json()
        if data["username"] in self.accounts:
            return web.json_response({"err": "Username already taken"})
        user_id = self._new_id()
        self.add_account(data["username"], data["password"], user_id, data["role"])
        return web.json_response({"token": make_token(user_id, data["username"], data["role"])}, status=201)


@pytest.fixture
async def backend():
    mock = MockBackend()
    server = TestServer(mock.app)
    await server.start_server()
    mock.base_url = f"http://{server.host}:{server.port}"
    yield mock
    await server.close()


@pytest.fixture
async def seeded(backend):
    return backend.seed()


@pytest.fixture
async def client(backend):
    http = HTTPClient(base_url=backend.base_url, timeout=5)
    yield http
    await http.close()


@pytest.fixture(autouse=True)
def clear_user_cache():
    user_cache.clear()
    yield
    user_cache.clear()


@pytest.fixture
def owner_session():
    # string id on purpose: restaurants carry numeric owner ids
    return Session.from_token(make_token("7", "olivia", "restaurant_owner"))


@pytest.fixture
def user_session():
    return Session.from_token(make_token(20, "ursula", "user"))
