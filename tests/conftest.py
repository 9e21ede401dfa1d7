"""
Pytest Configuration

Shared fixtures for the EndpointKit suite: isolation from ``ENDPOINTKIT_*``
environment variables, explicit settings objects, and canned payloads modelled
on the reqres.in demo API.
"""

from __future__ import annotations

import os

import pytest
from pydantic import BaseModel

from EndpointKit.settings import NetworkingSettings, reset_settings_cache


class Resource(BaseModel):
    """``/api/unknown/{id}`` resource returned by the demo API."""

    id: int
    name: str
    color: str


RESOURCE_BODY = {
    "data": {"id": 2, "name": "fuchsia rose", "year": 2001, "color": "#C74375"},
    "support": {"url": "https://reqres.in/#support-heading", "text": "Thanks!"},
}


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Strip ENDPOINTKIT_* variables and the settings cache around every test."""
    for key in list(os.environ):
        if key.upper().startswith("ENDPOINTKIT_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def settings() -> NetworkingSettings:
    return NetworkingSettings(_env_file=None, host="reqres.in", retry_delay_seconds=0.0)


@pytest.fixture
def resource_body() -> dict:
    return RESOURCE_BODY
