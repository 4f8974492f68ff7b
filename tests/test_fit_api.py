"""
Tests for the content fit HTTP endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from content_fit_service.main import app


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_budget(client):
    response = client.post("/budget", json={"width": 375, "has_image": False})

    assert response.status_code == 200
    body = response.json()
    assert body["max_chars_per_line"] == 70
    assert body["max_content_chars"] == 448
    assert body["max_lines"] == 8


def test_budget_rejects_non_positive_width(client):
    response = client.post("/budget", json={"width": 0})
    assert response.status_code == 422


def test_fit_check_uses_image_prompt_for_geometry(client):
    content = {"title": "Market outlook", "paragraphs": ["x" * 400], "image_prompt": "rising chart"}

    response = client.post("/fit-check", json={"content": content, "width": 375})

    assert response.status_code == 200
    body = response.json()
    assert body["fits"] is False
    assert body["too_many_chars"] is True
    assert body["budget"]["max_content_chars"] == 336


def test_fit_check_explicit_image_flag_wins(client):
    content = {"title": "Market outlook", "paragraphs": ["x" * 400], "image_prompt": "rising chart"}

    response = client.post("/fit-check", json={"content": content, "width": 375, "has_image": False})

    assert response.json()["fits"] is True


def test_prompt_constraints(client):
    response = client.post("/prompt-constraints", json={"width": 375, "has_image": True})

    assert response.status_code == 200
    body = response.json()
    assert "Maximum 336 characters" in body["constraints"]
    assert body["budget"]["max_lines"] == 6
