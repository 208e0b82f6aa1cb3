"""Shared fixtures for the studio tests."""

import pytest

from app import create_app
from tests.fakes import FakeClient, FakeGenerator


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def app(fake_generator):
    app = create_app(generator=fake_generator, config={"GEMINI_MODEL": "fake-model"})
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
