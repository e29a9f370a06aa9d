# tests/test_categories.py
from rateorant.services.categories import (
    BASE_CANDIDATES,
    CategoryEndpoint,
    category_candidates,
    find_restaurants_by_category,
    get_all_categories,
    get_restaurants_by_category,
)


async def test_all_categories(seeded, client):
    data = await get_all_categories(client)
    assert [c["id"] for c in data] == [1, 2]


async def test_categories_wrapped_in_data(backend, client):
    backend.overrides["/categories"] = (200, {"data": [{"id": 3, "category": "Thai"}]})
    assert await get_all_categories(client) == [{"id": 3, "category": "Thai"}]


def test_candidate_order():
    described = [c.describe(4) for c in category_candidates("/api")]
    assert described == [
        "/categories/4/restaurants",
        "/restaurants?category_id=4",
        "/restaurants?category=4",
        "/api/categories/4/restaurants",
        "/api/restaurants?category_id=4",
        "/api/restaurants?category=4",
    ]


def test_no_alternate_prefix():
    assert category_candidates("") == BASE_CANDIDATES


def test_endpoint_build():
    assert CategoryEndpoint("/restaurants", param="category").build(2) == {
        "endpoint": "/restaurants",
        "params": {"category": "2"},
    }


async def test_first_candidate_wins(seeded, client):
    result = await find_restaurants_by_category(client, 1)
    assert [r["name"] for r in result.restaurants] == ["Italian Corner", "Pasta Place"]
    assert result.endpoint == "/categories/1/restaurants"
    assert len(seeded.requests) == 1


async def test_falls_through_errors_and_non_lists(seeded, client):
    seeded.overrides["/categories/2/restaurants"] = (404, {"detail": "Not Found"})
    seeded.overrides["/restaurants?category_id=2"] = (200, {"message": "unsupported"})

    result = await find_restaurants_by_category(client, 2)

    assert [r["name"] for r in result.restaurants] == ["Sushi Bar"]
    assert result.endpoint == "/restaurants?category=2"
    assert result.attempts == [
        "/categories/2/restaurants",
        "/restaurants?category_id=2",
        "/restaurants?category=2",
    ]


async def test_alternate_prefix_is_tried(seeded, client):
    seeded.overrides["/categories/2/restaurants"] = (500, "boom")
    seeded.overrides["/restaurants?category_id=2"] = (500, "boom")
    seeded.overrides["/restaurants?category=2"] = (500, "boom")
    seeded.overrides["/api/categories/2/restaurants"] = (200, {"restaurants": [{"id": 3, "name": "Sushi Bar"}]})

    result = await find_restaurants_by_category(client, 2, category_candidates("/api"))
    assert result.endpoint == "/api/categories/2/restaurants"
    assert result.restaurants == [{"id": 3, "name": "Sushi Bar"}]


async def test_every_candidate_failing_is_empty(seeded, client):
    seeded.overrides["/categories/2/restaurants"] = (200, "not json")
    seeded.overrides["/restaurants?category_id=2"] = (200, {"detail": "nope"})
    seeded.overrides["/restaurants?category=2"] = (400, {"detail": "bad"})

    # the alternate prefix does not exist on this backend: 404 for all three
    assert await get_restaurants_by_category(client, 2) == []
    assert len(seeded.requests) == 6
