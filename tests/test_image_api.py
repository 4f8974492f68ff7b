"""
Tests for the slide image HTTP endpoints.
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from slide_image_service.api import get_registry, router
from slide_image_service.errors import ImageGenerationError
from slide_image_service.models import ImageRef
from slide_image_service.registry import SlideSessionRegistry

GENERATED = ImageRef(uri="gs://deck-images/generated.png", source="generated")


def make_client(generator) -> TestClient:
    registry = SlideSessionRegistry(lambda: generator)
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_registry] = lambda: registry
    return TestClient(app)


@pytest.fixture
def generator():
    stub = Mock()
    stub.generate = AsyncMock(return_value=GENERATED)
    return stub


@pytest.fixture
def client(generator):
    with make_client(generator) as test_client:
        yield test_client


def test_open_slide_starts_empty(client):
    response = client.post("/slides/s1", json={"image_prompt": "city skyline at dusk"})

    assert response.status_code == 200
    assert response.json() == {"slide_id": "s1", "state": {"kind": "empty"}}


def test_unknown_slide(client):
    assert client.get("/slides/missing/image").status_code == 404
    assert client.delete("/slides/missing").status_code == 404


def test_generate_and_wait(client, generator):
    client.post("/slides/s1", json={"image_prompt": "city skyline at dusk"})

    response = client.post("/slides/s1/generate", params={"wait": "true"})

    assert response.status_code == 200
    state = response.json()["state"]
    assert state["kind"] == "resolved"
    assert state["image"]["uri"] == GENERATED.uri
    generator.generate.assert_awaited_once_with("city skyline at dusk")


def test_generation_failure(generator):
    generator.generate = AsyncMock(side_effect=ImageGenerationError("quota exhausted"))
    with make_client(generator) as client:
        client.post("/slides/s1", json={})

        response = client.post("/slides/s1/generate", params={"wait": "true"})

    assert response.status_code == 200
    assert response.json()["state"] == {"kind": "failed", "reason": "quota exhausted"}


def test_pick_and_cancelled_pick(client):
    client.post("/slides/s1", json={})

    picked = client.post("/slides/s1/pick", json={"source": "gallery", "uri": "file:///photos/a.jpg"})
    cancelled = client.post("/slides/s1/pick", json={"source": "camera", "uri": None})

    assert picked.json()["state"]["image"] == {"uri": "file:///photos/a.jpg", "source": "gallery"}
    assert cancelled.status_code == 200
    assert cancelled.json()["state"] == picked.json()["state"]


def test_pick_rejects_unknown_source(client):
    client.post("/slides/s1", json={})

    response = client.post("/slides/s1/pick", json={"source": "scanner", "uri": "file:///x.png"})

    assert response.status_code == 422


def test_requests_while_generating_conflict():
    async def slow_generate(prompt):
        await asyncio.sleep(30)
        return GENERATED

    generator = Mock()
    generator.generate = slow_generate
    with make_client(generator) as client:
        client.post("/slides/s1", json={})

        started = client.post("/slides/s1/generate")
        again = client.post("/slides/s1/generate")
        pick = client.post("/slides/s1/pick", json={"source": "gallery", "uri": "file:///photos/a.jpg"})

        assert started.status_code == 202
        assert started.json()["state"] == {"kind": "generating"}
        assert again.status_code == 409
        assert "Operation in progress" in again.json()["detail"]
        assert pick.status_code == 409
        assert client.get("/slides/s1/image").json()["state"] == {"kind": "generating"}

        cleared = client.post("/slides/s1/clear")
        assert cleared.json()["state"] == {"kind": "empty"}


def test_discarded_slide_is_gone(client):
    client.post("/slides/s1", json={})

    assert client.delete("/slides/s1").status_code == 204
    assert client.get("/slides/s1/image").status_code == 410
    assert client.post("/slides/s1/generate").status_code == 410


def test_reopening_slide_starts_fresh_session(client):
    client.post("/slides/s1", json={})
    client.post("/slides/s1/generate", params={"wait": "true"})
    client.delete("/slides/s1")

    response = client.post("/slides/s1", json={})

    assert response.json()["state"] == {"kind": "empty"}
    assert client.get("/slides/s1/image").status_code == 200
