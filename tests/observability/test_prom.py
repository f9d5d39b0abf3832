# -*- coding: utf-8 -*-
"""
Tests para las métricas HTTP Prometheus.
"""

from types import SimpleNamespace

import pytest
from starlette.requests import Request

from app.observability import route_labels


def _request(route_path=None) -> Request:
    scope = {"type": "http", "method": "GET", "path": "/", "headers": []}
    if route_path is not None:
        scope["route"] = SimpleNamespace(path=route_path)
    return Request(scope)


@pytest.mark.parametrize(
    "route_path, expected",
    [
        ("/api/codes/redeem", ("/codes/redeem", "api")),
        ("/codes/redeem", ("/codes/redeem", "public")),
        ("/api", ("/", "api")),
        ("/apis/other", ("/apis/other", "public")),
        (None, ("unmatched", "none")),
    ],
)
def test_route_labels(route_path, expected):
    assert route_labels(_request(route_path)) == expected


@pytest.mark.asyncio
async def test_both_layers_share_route_label(async_client):
    await async_client.post("/api/codes/validate", json={"code": "bad"})
    await async_client.post("/codes/validate", json={"code": "bad"})
    await async_client.get("/metrics")

    text = (await async_client.get("/metrics")).text
    assert 'route="/codes/validate",layer="api",status="400"' in text
    assert 'route="/codes/validate",layer="public",status="400"' in text
    assert 'route="/metrics"' not in text
