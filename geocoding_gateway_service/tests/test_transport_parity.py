"""
Tests that HTTP and WebSocket callers receive identical envelopes for the
same upstream outcome.
"""

from __future__ import annotations

from typing import Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from geocoding_gateway_service.tests.conftest import (
    PARIS_RESULT,
    MockGeocodingClient,
    geocoding_request,
)


@pytest.mark.parametrize("upstream_fails", [False, True])
def test_http_and_websocket_envelopes_match(
    create_test_app: Callable[..., FastAPI],
    mock_geocoding_client: MockGeocodingClient,
    upstream_fails: bool,
) -> None:
    mock_geocoding_client.results_by_text["Paris"] = [PARIS_RESULT]
    mock_geocoding_client.fail_with_upstream_error = upstream_fails
    app = create_test_app()

    with TestClient(app) as client:
        http_payload = client.post("/geocode", json={"text": "Paris", "k": "1"}).json()
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json(geocoding_request("Paris", k="1"))
            ws_frame = websocket.receive_json()

    assert ws_frame["event"] == "geocoding-response"
    assert ws_frame["data"] == http_payload
    assert mock_geocoding_client.calls == [("Paris", "1"), ("Paris", "1")]


def test_non_object_results_match_on_both_transports(
    create_test_app: Callable[..., FastAPI],
    mock_geocoding_client: MockGeocodingClient,
) -> None:
    mock_geocoding_client.results_by_text["Paris"] = ["Paris, France", None]
    app = create_test_app()

    with TestClient(app) as client:
        http_response = client.post("/geocode", json={"text": "Paris"})
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json(geocoding_request("Paris"))
            ws_frame = websocket.receive_json()

    expected = {"status": "success", "results": ["Paris, France", None]}
    assert http_response.status_code == 200
    assert http_response.json() == expected
    assert ws_frame["data"] == expected
