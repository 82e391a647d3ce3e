"""HTTP-level tests for the /api routes with upstream services faked out."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from verdict.config.settings import settings
from verdict.controllers.dependencies import get_settings
from verdict.main import create_app
from verdict.pipelines.analysis import TranscriptionResult
from verdict.pipelines.analysis.types import ApiStatus
from verdict.services import AnalysisService, InMemorySessionStore
from verdict.services.subscription import (
    InMemorySubscriptionRepository,
    SubscriptionRecord,
    SubscriptionService,
)

SUBSCRIBER = "pat@example.com"


class FakeTranscriber:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def transcribe(self, audio_base64: str) -> TranscriptionResult:
        self.calls.append(audio_base64)
        return TranscriptionResult.from_text(f"transcript of {audio_base64}")


class FakeStreamer:
    def __init__(self) -> None:
        self.chunks = ["**VERDICT**: ", "You should eat ", "pad thai."]
        self.user_prompts: list[str] = []

    async def stream_text(self, *, system_prompt, user_prompt, temperature):
        self.user_prompts.append(user_prompt)
        for chunk in self.chunks:
            yield chunk

    async def check_status(self) -> ApiStatus:
        return ApiStatus(has_access=True, message="API access confirmed")


class Harness:
    def __init__(self) -> None:
        self.transcriber = FakeTranscriber()
        self.streamer = FakeStreamer()
        self.store = InMemorySessionStore()
        self.checkouts: list[dict] = []

        def fake_create(**kwargs):
            self.checkouts.append(kwargs)
            return {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/pay/cs_test_1"}

        stripe_config = settings.stripe.model_copy(update={"secret_key": SecretStr("sk_test_verdict")})
        self.subscriptions = SubscriptionService(
            InMemorySubscriptionRepository(
                [
                    SubscriptionRecord(
                        id=1,
                        email=SUBSCRIBER,
                        stripe_customer_id="cus_123",
                        stripe_price_id=stripe_config.price_id,
                    )
                ]
            ),
            stripe_config,
            create_checkout=fake_create,
        )
        self.app = create_app(
            settings.model_copy(update={"environment": "production", "store_backend": "memory"}),
            session_store=self.store,
            transcribe_service=self.transcriber,
            analysis_service=AnalysisService(self.streamer),
            subscription_service=self.subscriptions,
        )
        self.client = TestClient(self.app)


@pytest.fixture()
def harness() -> Harness:
    harness = Harness()
    yield harness
    harness.app.dependency_overrides.clear()


def _submission(**overrides) -> dict:
    body = {
        "email": SUBSCRIBER,
        "partner1Name": "Alex",
        "partner2Name": "Sam",
        "partner1Audio": "QUxFWA==",
        "partner2Audio": "U0FN",
        "mode": "dinner",
        "isLiveArgument": False,
    }
    body.update(overrides)
    return body


def test_create_session_happy_path(harness: Harness) -> None:
    response = harness.client.post("/api/sessions", json=_submission())

    assert response.status_code == 200
    payload = response.json()
    assert payload == {"aiResponse": "**VERDICT**: You should eat pad thai.", "sessionId": 1}
    assert sorted(harness.transcriber.calls) == ["QUxFWA==", "U0FN"]
    assert "- Alex: transcript of QUxFWA==" in harness.streamer.user_prompts[0]
    assert "- Sam: transcript of U0FN" in harness.streamer.user_prompts[0]

    stored = harness.client.get("/api/sessions/1")
    assert stored.status_code == 200
    session = stored.json()
    assert session["partner1Name"] == "Alex"
    assert session["mode"] == "dinner"
    assert session["active"] is True
    assert session["isLiveArgument"] is False
    assert session["transcriptionData"]["partner1"]["text"] == "transcript of QUxFWA=="
    assert json.loads(session["aiResponse"])["verdict"] == payload["aiResponse"]


def test_live_argument_transcribes_once(harness: Harness) -> None:
    response = harness.client.post(
        "/api/sessions",
        json=_submission(mode="evaluator", isLiveArgument=True, partner2Audio=None),
    )

    assert response.status_code == 200
    assert harness.transcriber.calls == ["QUxFWA=="]
    assert "- Sam: No input provided" in harness.streamer.user_prompts[0]

    session = harness.client.get(f"/api/sessions/{response.json()['sessionId']}").json()
    assert session["partner2Audio"] == ""
    assert session["transcriptionData"]["partner2"] is None


def test_unsubscribed_email_is_rejected(harness: Harness) -> None:
    response = harness.client.post("/api/sessions", json=_submission(email="stranger@example.com"))

    assert response.status_code == 402
    assert response.json() == {"error": "Subscription required"}
    assert harness.transcriber.calls == []


def test_development_mode_skips_subscription(harness: Harness) -> None:
    harness.app.dependency_overrides[get_settings] = lambda: settings.model_copy(
        update={"environment": "development"}
    )

    response = harness.client.post("/api/sessions", json=_submission(email=None))

    assert response.status_code == 200


def test_missing_names_are_rejected(harness: Harness) -> None:
    response = harness.client.post(
        "/api/sessions", json=_submission(partner1Name="", partner2Name=" ")
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Partner names are required"}


def test_missing_partner2_audio_requires_live_mode(harness: Harness) -> None:
    response = harness.client.post("/api/sessions", json=_submission(partner2Audio=None))

    assert response.status_code == 400
    assert "partner2Audio" in response.json()["error"]
    assert harness.transcriber.calls == []


def test_unknown_mode_is_a_bad_request(harness: Harness) -> None:
    response = harness.client.post("/api/sessions", json=_submission(mode="therapist"))

    assert response.status_code == 400
    assert "mode" in response.json()["error"]


def test_empty_verdict_leaves_session_pending(harness: Harness) -> None:
    harness.streamer.chunks = []

    response = harness.client.post("/api/sessions", json=_submission())

    assert response.status_code == 500
    assert response.json() == {"error": "Analysis failed. Please try again."}
    session = harness.client.get("/api/sessions/1").json()
    assert session["aiResponse"] is None


def test_unknown_session_is_not_found(harness: Harness) -> None:
    response = harness.client.get("/api/sessions/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Session not found"}


def test_status_reports_access(harness: Harness) -> None:
    response = harness.client.get("/api/status")

    assert response.status_code == 200
    assert response.json() == {"hasAccess": True, "message": "API access confirmed"}


def test_checkout_returns_redirect_url(harness: Harness) -> None:
    response = harness.client.post("/api/checkout", json={"email": "new@example.com"})

    assert response.status_code == 200
    assert response.json() == {"url": "https://checkout.stripe.com/c/pay/cs_test_1"}
    assert harness.checkouts[0]["customer_email"] == "new@example.com"


def test_checkout_requires_email(harness: Harness) -> None:
    response = harness.client.post("/api/checkout", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Email is required"}
    assert harness.checkouts == []


def test_health_and_metrics(harness: Harness) -> None:
    assert harness.client.get("/health").json()["status"] == "healthy"

    metrics = harness.client.get("/metrics")
    assert metrics.status_code == 200
    assert "http_requests_total" in metrics.text
