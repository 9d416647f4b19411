import json

import httpx
import pytest

from src.integrations.clients.mocks.quote_requests import MockQuoteRequestClient
from src.integrations.clients.real_http.quote_requests import RealQuoteRequestClient
from src.integrations.clients.real_http.training_progress import RealTrainingProgressClient
from src.integrations.contracts.interfaces import QuoteSubmissionError, TrainingProgressError
from src.integrations.contracts.quote_requests import QuoteRequestPayload, format_height

PAYLOAD = {"coverageType": "term", "coverageAmount": "250000", "firstName": "Jane"}


def _client(handler, **kwargs):
    return RealQuoteRequestClient(
        base_url="https://quotes.example.com/",
        api_key="secret",
        path="/api/quote-requests",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_real_client_posts_json_and_returns_receipt():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "qr_42"})

    receipt = await _client(handler).submit_quote_request(PAYLOAD)

    assert seen == {"url": "https://quotes.example.com/api/quote-requests", "auth": "Bearer secret", "body": PAYLOAD}
    assert receipt.status_code == 201
    assert receipt.request_id == "qr_42"


@pytest.mark.asyncio
async def test_real_client_accepts_empty_2xx_body():
    receipt = await _client(lambda request: httpx.Response(204)).submit_quote_request(PAYLOAD)
    assert receipt.status_code == 204
    assert receipt.body == {}
    assert receipt.request_id is None


@pytest.mark.asyncio
async def test_real_client_non_2xx_raises_with_status():
    with pytest.raises(QuoteSubmissionError) as exc:
        await _client(lambda request: httpx.Response(500, json={"error": "boom"})).submit_quote_request(PAYLOAD)
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_real_client_network_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(QuoteSubmissionError) as exc:
        await _client(handler).submit_quote_request(PAYLOAD)
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_real_client_requires_base_url(monkeypatch):
    monkeypatch.delenv("QUOTE_REQUESTS_API_URL", raising=False)
    with pytest.raises(ValueError):
        await RealQuoteRequestClient().submit_quote_request(PAYLOAD)


def test_real_client_leaves_timeout_unset_unless_configured():
    assert "timeout" not in _client(lambda request: httpx.Response(200))._client_kwargs()
    assert _client(lambda request: httpx.Response(200), timeout_seconds=3.0)._client_kwargs()["timeout"] == 3.0


@pytest.mark.asyncio
async def test_mock_client_records_and_fails_on_demand():
    client = MockQuoteRequestClient()
    receipt = await client.submit_quote_request(PAYLOAD)
    assert receipt.status_code == 201
    assert receipt.request_id == "1"

    client.fail_with(status_code=503)
    with pytest.raises(QuoteSubmissionError):
        await client.submit_quote_request(PAYLOAD)
    assert client.attempts == 2
    assert client.submissions == [PAYLOAD]


def test_payload_wire_format_is_camel_case_with_height():
    payload = QuoteRequestPayload(
        coverage_type="whole",
        coverage_amount="500000",
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        phone="5551234567",
        street_address="12 Main Street",
        city="Austin",
        state="TX",
        zip_code="73301",
        height_feet="6",
        height_inches="0",
        weight="190",
        birth_date="1980-01-01",
        medical_background="Asthma",
    ).to_wire()
    assert payload["zipCode"] == "73301"
    assert payload["addressLine2"] is None
    assert payload["height"] == "6'0\""
    assert format_height(5, 11) == "5'11\""


@pytest.mark.asyncio
async def test_training_client_posts_update():
    def handler(request):
        body = json.loads(request.content)
        assert request.url.path == "/api/training/progress"
        return httpx.Response(200, json={**body, "status": "in_progress"})

    client = RealTrainingProgressClient(base_url="https://portal.example.com", transport=httpx.MockTransport(handler))
    row = await client.save_progress({"moduleId": "m1", "progressPercent": 40})
    assert row == {"moduleId": "m1", "progressPercent": 40, "status": "in_progress"}


@pytest.mark.asyncio
async def test_training_client_wraps_http_errors():
    client = RealTrainingProgressClient(
        base_url="https://portal.example.com",
        transport=httpx.MockTransport(lambda request: httpx.Response(401)),
    )
    with pytest.raises(TrainingProgressError):
        await client.save_progress({"moduleId": "m1"})


@pytest.mark.asyncio
async def test_training_client_tolerates_non_json_success_body():
    client = RealTrainingProgressClient(
        base_url="https://portal.example.com",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="ok")),
    )
    assert await client.save_progress({"moduleId": "m1"}) == {}


@pytest.mark.asyncio
async def test_training_client_fetches_module_progress():
    def handler(request):
        assert request.method == "GET"
        assert request.url.path == "/api/training/progress/m1"
        assert request.url.params["agentId"] == "agent-7"
        return httpx.Response(200, json={"moduleId": "m1", "status": "completed", "timeSpentMinutes": 12})

    client = RealTrainingProgressClient(base_url="https://portal.example.com", transport=httpx.MockTransport(handler))
    row = await client.get_progress("m1", agent_id="agent-7")
    assert row["status"] == "completed"
    assert row["timeSpentMinutes"] == 12


@pytest.mark.asyncio
async def test_training_client_missing_progress_is_none():
    client = RealTrainingProgressClient(
        base_url="https://portal.example.com",
        transport=httpx.MockTransport(lambda request: httpx.Response(404)),
    )
    assert await client.get_progress("m1") is None


@pytest.mark.asyncio
async def test_training_client_wraps_read_errors():
    client = RealTrainingProgressClient(
        base_url="https://portal.example.com",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )
    with pytest.raises(TrainingProgressError):
        await client.get_progress("m1")
