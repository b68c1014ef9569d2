"""
Tests for briefing generation: prompt contents, Gemini response handling
and the failure payloads returned instead of exceptions
"""
import asyncio
import json
from datetime import date

import httpx

from helpers.BriefingGenerator import build_briefing_prompt, generate_briefing
from models.models import Competition, User, UserRole, UserStatus


COMPETITION = Competition(
    id="c1",
    name="Campeonato Regional de Inverno 2024",
    date=date(2024, 12, 15),
    location="Complexo de Piscinas do Jamor",
    description="Mandatory briefing at 08:30.",
    cra_responsible="Alexandre Alves",
)
ATTENDEES = [User(id="u2", name="João Silva", email="ref@swimref.pt", role=UserRole.REFEREE, status=UserStatus.APPROVED)]


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _run(coro):
    return asyncio.run(coro)


def test_prompt_contains_competition_and_sections():
    prompt = build_briefing_prompt(COMPETITION, ATTENDEES)
    assert "Campeonato Regional de Inverno 2024" in prompt
    assert "Sunday, 15 December 2024" in prompt
    assert "João Silva" in prompt
    assert "Alexandre Alves" in prompt
    for section in ("1. Welcome", "2. Key times", "3. Roles", "4. Focus points", "5. Procedures", "6. Closing"):
        assert section in prompt


def test_prompt_without_attendees_accepts_plain_dicts():
    prompt = build_briefing_prompt({"name": "Open", "date": "2025-03-22", "location": "Coimbra"}, [])
    assert "No referees confirmed yet" in prompt
    assert "Saturday, 22 March 2025" in prompt
    assert "Not assigned" in prompt


def test_missing_api_key_returns_error():
    status, payload = _run(generate_briefing(COMPETITION, ATTENDEES, api_key="", model="gemini-test"))
    assert status == 500
    assert "API key" in payload["error"]


def test_successful_generation():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": "### Briefing\n"}, {"text": "Welcome all."}]}}]
        })

    async def scenario():
        async with _client(handler) as client:
            return await generate_briefing(COMPETITION, ATTENDEES, "secret", "gemini-test", client=client)

    status, payload = _run(scenario())
    assert status == 200
    assert payload == {"briefing": "### Briefing\nWelcome all."}
    assert seen["url"].endswith("/models/gemini-test:generateContent")
    assert seen["key"] == "secret"
    assert "João Silva" in seen["body"]["contents"][0]["parts"][0]["text"]


def test_empty_response_is_an_error():
    async def scenario():
        async with _client(lambda request: httpx.Response(200, json={"candidates": []})) as client:
            return await generate_briefing(COMPETITION, ATTENDEES, "secret", "gemini-test", client=client)

    status, payload = _run(scenario())
    assert status == 500
    assert payload == {"error": "The AI response was empty."}


def test_upstream_failure_is_an_error():
    async def scenario():
        async with _client(lambda request: httpx.Response(503, text="overloaded")) as client:
            return await generate_briefing(COMPETITION, ATTENDEES, "secret", "gemini-test", client=client)

    status, payload = _run(scenario())
    assert status == 500
    assert "error" in payload


def test_network_failure_is_an_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    async def scenario():
        async with _client(handler) as client:
            return await generate_briefing(COMPETITION, ATTENDEES, "secret", "gemini-test", client=client)

    status, payload = _run(scenario())
    assert status == 500
    assert "error" in payload


def test_endpoint_validates_request(client):
    """Missing competition data is a 400; other methods are a 405"""
    response = client.post("/api/generate-briefing", json={"attendees": []})
    assert response.status_code == 400
    assert "error" in response.json()

    response = client.get("/api/generate-briefing")
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}


def test_endpoint_without_api_key(client):
    response = client.post("/api/generate-briefing", json={
        "competition": {"name": "Open", "date": "2025-03-22", "location": "Coimbra"},
        "attendees": []
    })
    assert response.status_code == 500
    assert "API key" in response.json()["error"]
