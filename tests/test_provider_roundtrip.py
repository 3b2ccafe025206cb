"""End-to-end tests against a FastAPI stand-in for the Amplitude endpoints."""

import json
import secrets
from datetime import date
from urllib.parse import parse_qs

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.testclient import TestClient

from amplitude_api.client.api import AmplitudeAPI
from amplitude_api.config.settings import AmplitudeConfig
from amplitude_api.records.event import Event

API_KEY = "api-key"
SECRET_KEY = "secret-key"

basic = HTTPBasic()


def _authorized(credentials: HTTPBasicCredentials) -> bool:
    return secrets.compare_digest(credentials.username, API_KEY) and secrets.compare_digest(
        credentials.password, SECRET_KEY
    )


def build_provider() -> FastAPI:
    app = FastAPI(title="Amplitude stand-in")
    app.state.received = []

    @app.post("/httpapi")
    async def httpapi(request: Request):
        form = parse_qs((await request.body()).decode())
        if form.get("api_key") != [API_KEY]:
            return PlainTextResponse("invalid_api_key", status_code=400)
        app.state.received.append(form)
        return PlainTextResponse("success")

    @app.get("/api/2/events/segmentation")
    def segmentation(request: Request, credentials: HTTPBasicCredentials = Depends(basic)):
        if not _authorized(credentials):
            return JSONResponse({"error": "unauthorized"}, status_code=401)
        params = request.query_params
        return {
            "data": {
                "series": [[4, 2]],
                "xValues": [params["start"], params["end"]],
                "segments": params.getlist("s"),
            }
        }

    @app.post("/api/2/deletions/users")
    async def deletions(request: Request, credentials: HTTPBasicCredentials = Depends(basic)):
        if not _authorized(credentials):
            return JSONResponse({"error": "unauthorized"}, status_code=401)
        form = parse_qs((await request.body()).decode())
        return {
            "user_ids": form.get("user_ids", []),
            "amplitude_ids": form.get("amplitude_ids", []),
            "requester": form.get("requester", [None])[0],
        }

    return app


@pytest.fixture
def provider():
    app = build_provider()
    with TestClient(app) as client:
        yield app, client


@pytest.fixture
def api(provider):
    _, client = provider
    return AmplitudeAPI(AmplitudeConfig(api_key=API_KEY, secret_key=SECRET_KEY), client=client)


class TestTrackRoundtrip:
    def test_events_accepted(self, api, provider):
        app, _ = provider
        response = api.track(
            Event(user_id="u1", event_type="login"),
            Event(device_id="d1", event_type="purchase", price=9.99, product_id="sku-1"),
        )
        assert response.status_code == 200
        assert response.text == "success"
        [form] = app.state.received
        events = json.loads(form["event"][0])
        assert len(events) == 2
        assert events[1]["quantity"] == 1
        assert events[1]["product_id"] == "sku-1"

    def test_identifications_accepted(self, api, provider):
        app, _ = provider
        response = api.send_identify("u1", None, {"plan": "pro"})
        assert response.status_code == 200
        [form] = app.state.received
        assert json.loads(form["identification"][0]) == [
            {"user_id": "u1", "user_properties": {"plan": "pro"}}
        ]

    def test_bad_api_key_response_passed_through(self, provider):
        _, client = provider
        api = AmplitudeAPI(AmplitudeConfig(api_key="wrong"), client=client)
        response = api.track(Event(user_id="u1", event_type="login"))
        assert response.status_code == 400
        assert response.text == "invalid_api_key"


class TestSegmentationRoundtrip:
    def test_query_reaches_provider(self, api):
        response = api.segmentation(
            {"event_type": "login"},
            date(2023, 1, 15),
            date(2023, 1, 21),
            m="totals",
            s=[{"prop": "country", "op": "is", "values": ["NL"]}],
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["xValues"] == ["20230115", "20230121"]
        assert [json.loads(s) for s in data["segments"]] == [
            {"prop": "country", "op": "is", "values": ["NL"]}
        ]

    def test_wrong_secret_unauthorized(self, provider):
        _, client = provider
        api = AmplitudeAPI(AmplitudeConfig(api_key=API_KEY, secret_key="nope"), client=client)
        response = api.segmentation({"event_type": "login"}, date(2023, 1, 1), date(2023, 1, 2))
        assert response.status_code == 401


class TestDeletionRoundtrip:
    def test_deletion_request(self, api):
        response = api.delete(user_ids=["u1", "u2"], requester="privacy@example.com")
        assert response.status_code == 200
        assert response.json() == {
            "user_ids": ["u1", "u2"],
            "amplitude_ids": [],
            "requester": "privacy@example.com",
        }
