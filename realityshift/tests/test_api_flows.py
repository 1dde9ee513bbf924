from __future__ import annotations

import asyncio
import io

import pytest
from flask import Flask
from flask.testing import FlaskClient

from realityshift.infrastructure.http import run_with_deadline


def _create_goal(client: FlaskClient, **overrides) -> dict:
    payload = {"title": "Learn German", "domainId": 1, "desiredState": "Order food in German"}
    payload.update(overrides)
    response = client.post("/api/goals", json=payload)
    assert response.status_code == 200
    return response.get_json()["data"]


def test_health_and_metrics(client: FlaskClient) -> None:
    health = client.get("/api/health")

    assert health.status_code == 200
    assert health.get_json() == {"ok": True, "database": "ok"}
    assert health.headers["X-Content-Type-Options"] == "nosniff"
    assert health.headers.get("X-Request-ID")

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert b"realityshift_requests_total" in metrics.data


def test_domains_are_public(client: FlaskClient) -> None:
    response = client.get("/api/goals/domains")

    assert response.status_code == 200
    domains = response.get_json()["data"]["domains"]
    assert len(domains) == 8
    assert domains[0]["name"] == "Languages"


def test_goals_require_a_session(client: FlaskClient) -> None:
    response = client.get("/api/goals")

    assert response.status_code == 401
    assert response.get_json()["error"] == "Unauthorized"


def test_create_goal_schedules_first_challenge(signed_in: FlaskClient) -> None:
    data = _create_goal(signed_in)

    assert data["goal"]["title"] == "Learn German"
    assert data["goal"]["status"] == "active"
    first = data["firstChallenge"]
    assert first["templateId"] == "tpl-lang-001"
    assert first["difficulty"] <= 4
    assert first["isRealityShift"] is False

    overview = signed_in.get("/api/challenges").get_json()["data"]
    assert [c["id"] for c in overview["today"]] == [first["id"]]
    assert overview["streak"] == 0

    goals = signed_in.get("/api/goals").get_json()["data"]["goals"]
    assert goals[0]["domain"]["name"] == "Languages"


def test_create_goal_requires_title_and_domain(signed_in: FlaskClient) -> None:
    response = signed_in.post("/api/goals", json={"title": "  "})

    assert response.status_code == 400
    assert response.get_json()["error"] == "Title and domain are required"


def test_complete_then_skip_is_rejected(signed_in: FlaskClient) -> None:
    challenge_id = _create_goal(signed_in)["firstChallenge"]["id"]

    done = signed_in.post(
        f"/api/challenges/{challenge_id}/complete",
        json={"difficultyFelt": 4, "satisfaction": 8, "notes": "fun"},
    )

    assert done.status_code == 200
    data = done.get_json()["data"]
    assert data["challenge"]["status"] == "completed"
    assert data["log"]["satisfaction"] == 8
    assert data["streakCount"] == 1
    assert data["streakUpdated"] is True

    again = signed_in.post(f"/api/challenges/{challenge_id}/complete", json={})
    assert again.status_code == 400
    assert again.get_json()["error"] == "Challenge already completed"

    skip = signed_in.post(f"/api/challenges/{challenge_id}/skip", json={})
    assert skip.status_code == 400


def test_skip_records_reason(signed_in: FlaskClient) -> None:
    challenge_id = _create_goal(signed_in)["firstChallenge"]["id"]

    response = signed_in.post(f"/api/challenges/{challenge_id}/skip", json={})

    assert response.status_code == 200
    challenge = response.get_json()["data"]["challenge"]
    assert challenge["status"] == "skipped"
    assert challenge["skippedReason"] == "Skipped by user"


def test_unknown_challenge_is_not_found(signed_in: FlaskClient) -> None:
    response = signed_in.post("/api/challenges/does-not-exist/complete", json={})

    assert response.status_code == 404
    assert response.get_json()["error"] == "Challenge not found"


def test_goal_actions_over_http(signed_in: FlaskClient) -> None:
    goal_id = _create_goal(signed_in)["goal"]["id"]

    missing = signed_in.post("/api/goals/nope/explode")
    invalid = signed_in.post(f"/api/goals/{goal_id}/explode")
    level_up = signed_in.post(f"/api/goals/{goal_id}/levelup")

    assert missing.status_code == 404
    assert invalid.status_code == 400
    assert invalid.get_json()["error"] == "Invalid action"
    assert level_up.status_code == 200
    assert level_up.get_json()["data"]["goal"]["title"] == "Learn German (Level 2)"


def test_generate_requires_session(client: FlaskClient) -> None:
    response = client.post("/api/challenges/generate", json={"goalId": "g1"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "Unauthorized"


def test_generate_requires_goal_id(signed_in: FlaskClient) -> None:
    response = signed_in.post("/api/challenges/generate", json={})

    assert response.status_code == 400
    assert response.get_json()["error"] == "Goal ID is required"


def test_generate_without_provider_key_is_configuration_error(signed_in: FlaskClient) -> None:
    goal_id = _create_goal(signed_in)["goal"]["id"]

    response = signed_in.post("/api/challenges/generate", json={"goalId": goal_id})

    assert response.status_code == 500
    assert response.get_json()["error"] == "Server configuration error: Missing OpenAI Key"


def test_generate_timeout_is_gateway_timeout(
    app: Flask, signed_in: FlaskClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def slow_generate(prompt: str) -> dict:
        return await run_with_deadline(
            asyncio.sleep(1), target="openai:chat.completions", timeout_ms=20
        )

    container = app.extensions["realityshift"]
    monkeypatch.setattr(container.openai_gateway, "generate_challenge", slow_generate)
    goal_id = _create_goal(signed_in)["goal"]["id"]

    response = signed_in.post("/api/challenges/generate", json={"goalId": goal_id})

    assert response.status_code == 504
    body = response.get_json()
    assert body["success"] is False
    assert body["errorType"] == "timeout"
    assert "timed out after 20ms" in body["error"]


def test_generate_schedules_model_challenge(
    app: Flask, signed_in: FlaskClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def fake_generate(prompt: str) -> dict:
        return {"title": "Order coffee in German", "description": "Only German", "difficulty": 6}

    monkeypatch.setattr(app.extensions["realityshift"].openai_gateway, "generate_challenge", fake_generate)
    goal_id = _create_goal(signed_in)["goal"]["id"]

    response = signed_in.post("/api/challenges/generate", json={"goalId": goal_id})

    assert response.status_code == 200
    challenge = response.get_json()["data"]["challenge"]
    assert challenge["title"] == "Order coffee in German"
    assert challenge["goalId"] == goal_id
    assert challenge["status"] == "pending"


def test_templates_filter_and_accept(signed_in: FlaskClient) -> None:
    hard = signed_in.get("/api/challenges/templates?domainId=1&difficulty=hard").get_json()["data"]
    assert hard["templates"]
    assert all(t["difficulty"] >= 7 and t["domainId"] == 1 for t in hard["templates"])

    bad = signed_in.get("/api/challenges/templates?difficulty=extreme")
    assert bad.status_code == 400

    goal_id = _create_goal(signed_in)["goal"]["id"]
    accepted = signed_in.post("/api/challenges/accept", json={"templateId": hard["templates"][0]["id"]})
    assert accepted.status_code == 200
    assert accepted.get_json()["data"]["challenge"]["goalId"] == goal_id

    missing = signed_in.post("/api/challenges/accept", json={})
    assert missing.status_code == 400
    assert missing.get_json()["error"] == "Template ID is required"


def test_habit_lifecycle(signed_in: FlaskClient) -> None:
    created = signed_in.post("/api/habits", json={"name": "Meditate", "icon": "🧘"})
    assert created.status_code == 200
    habit_id = created.get_json()["data"]["habit"]["id"]
    other = signed_in.post("/api/habits", json={"name": "Run"}).get_json()["data"]["habit"]["id"]

    batch = signed_in.post(
        "/api/habits/log",
        json={
            "logs": [
                {"habitId": habit_id, "completed": True, "notes": "10 min"},
                {"habitId": "ghost", "completed": True},
            ]
        },
    )
    results = batch.get_json()["data"]["results"]
    assert results[0]["success"] is True
    assert results[1] == {"habitId": "ghost", "error": "Habit not found"}

    single = signed_in.post("/api/habits/log", json={"habitId": other, "completed": False})
    assert single.get_json()["data"]["log"]["completed"] is False

    day = signed_in.get("/api/habits/log").get_json()["data"]
    by_id = {entry["habitId"]: entry for entry in day["logs"]}
    assert by_id[habit_id]["completed"] is True
    assert by_id[habit_id]["notes"] == "10 min"

    listed = signed_in.get("/api/habits").get_json()["data"]["habits"]
    meditate = next(h for h in listed if h["id"] == habit_id)
    assert meditate["completedToday"] is True
    assert meditate["streak"] == 1

    renamed = signed_in.put("/api/habits", json={"id": habit_id, "name": "Meditate daily"})
    assert renamed.get_json()["data"]["habit"]["name"] == "Meditate daily"

    assert signed_in.delete(f"/api/habits?id={habit_id}").status_code == 200
    assert signed_in.delete("/api/habits").status_code == 400
    assert signed_in.post("/api/habits/log", json={}).get_json()["error"] == "habitId or logs array required"


def test_interpret_falls_back_to_keywords(signed_in: FlaskClient) -> None:
    signed_in.post("/api/habits", json={"name": "Meditate"})
    signed_in.post("/api/habits", json={"name": "Run"})

    response = signed_in.post(
        "/api/habits/interpret", json={"transcript": "Meditated this morning, run skipped"}
    )

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["fallbackMode"] is True
    outcomes = {log["habitName"]: log["completed"] for log in data["interpretedLogs"]}
    assert outcomes == {"Meditate": True, "Run": False}


def test_interpret_requires_transcript(signed_in: FlaskClient) -> None:
    response = signed_in.post("/api/habits/interpret", json={})

    assert response.status_code == 400
    assert response.get_json()["error"] == "Transcript is required"


def test_survey_upsert_and_history(signed_in: FlaskClient) -> None:
    incomplete = signed_in.post("/api/surveys", json={"energyLevel": 5})
    assert incomplete.status_code == 400

    first = signed_in.post("/api/surveys", json={"energyLevel": 5, "motivationLevel": 6, "overallMood": 7})
    second = signed_in.post(
        "/api/surveys",
        json={"energyLevel": 8, "motivationLevel": 8, "overallMood": 9, "gratitudeNote": "sunshine"},
    )
    assert first.get_json()["data"]["survey"]["id"] == second.get_json()["data"]["survey"]["id"]

    surveys = signed_in.get("/api/surveys?days=7").get_json()["data"]["surveys"]
    assert len(surveys) == 1
    assert surveys[0]["overallMood"] == 9
    assert surveys[0]["gratitudeNote"] == "sunshine"


def test_diary_entries(signed_in: FlaskClient) -> None:
    created = signed_in.post(
        "/api/diary", json={"transcript": "Great day", "audioDurationSeconds": 42, "moodScore": 8}
    )
    assert created.status_code == 200
    assert created.get_json()["data"]["entry"]["entryType"] == "voice"

    entries = signed_in.get("/api/diary").get_json()["data"]["entries"]
    assert [e["transcript"] for e in entries] == ["Great day"]


def test_settings_round_trip(signed_in: FlaskClient) -> None:
    defaults = signed_in.get("/api/settings").get_json()["data"]["preferences"]
    assert defaults["preferredDifficulty"] == 5

    saved = signed_in.post(
        "/api/settings", json={"preferredDifficulty": 7, "focusAreas": ["mornings"], "theme": "dark"}
    )

    prefs = saved.get_json()["data"]["preferences"]
    assert prefs["preferredDifficulty"] == 7
    assert prefs["focusAreas"] == ["mornings"]
    assert prefs["theme"] == "dark"
    assert prefs["challengesPerDay"] == 1


def test_custom_coaches(signed_in: FlaskClient) -> None:
    invalid = signed_in.post("/api/coaches", json={"name": "Stoic"})
    assert invalid.status_code == 400
    assert invalid.get_json()["error"] == "Name and instructions are required"

    created = signed_in.post(
        "/api/coaches", json={"name": "Stoic", "systemPrompt": "You speak like Marcus Aurelius."}
    )
    coach = created.get_json()["data"]["coach"]
    assert coach["icon"] == "🤖"

    listed = signed_in.get("/api/coaches").get_json()["data"]["coaches"]
    assert [c["id"] for c in listed] == [coach["id"]]

    assert signed_in.delete(f"/api/coaches?id={coach['id']}").status_code == 200
    assert signed_in.delete(f"/api/coaches?id={coach['id']}").status_code == 404
    assert signed_in.delete("/api/coaches").status_code == 400


def test_expert_chat_without_model_replies_from_context(signed_in: FlaskClient) -> None:
    _create_goal(signed_in)

    welcome = signed_in.get("/api/expert/chat").get_json()["data"]["messages"]
    assert len(welcome) == 1
    assert welcome[0]["role"] == "assistant"

    reply = signed_in.post("/api/expert/chat", json={"message": "How am I doing on progress?"})
    assert reply.status_code == 200
    assert "Learn German" in reply.get_json()["data"]["reply"]

    history = signed_in.get("/api/expert/chat").get_json()["data"]["messages"]
    assert [m["role"] for m in history] == ["user", "assistant"]

    other_coach = signed_in.get("/api/expert/chat?coachId=someone-else").get_json()["data"]["messages"]
    assert len(other_coach) == 1

    empty = signed_in.post("/api/expert/chat", json={})
    assert empty.status_code == 400
    assert empty.get_json()["error"] == "Message is required"


def test_onboarding_analyze_and_complete(signed_in: FlaskClient) -> None:
    missing = signed_in.post("/api/onboarding/analyze", json={})
    assert missing.status_code == 400

    analyzed = signed_in.post(
        "/api/onboarding/analyze", json={"answers": {"motivation": "feel better", "timeAvailable": "30 minutes"}}
    )
    data = analyzed.get_json()["data"]
    assert data["fallback"] is True
    assert len(data["suggestions"]) == 5

    completed = signed_in.post("/api/onboarding/complete", json={"surveyData": {"motivation": "feel better"}})
    assert completed.get_json() == {"success": True, "message": "Onboarding completed successfully"}
    assert signed_in.get("/api/auth/me").get_json()["user"]["onboardingCompleted"] is True


def test_media_endpoints_validate_input(signed_in: FlaskClient) -> None:
    no_file = signed_in.post("/api/transcribe")
    assert no_file.status_code == 400
    assert no_file.get_json()["error"] == "No file provided"

    no_text = signed_in.post("/api/tts", json={})
    assert no_text.get_json()["error"] == "No text provided"

    too_long = signed_in.post("/api/tts", json={"text": "a" * 4097})
    assert too_long.status_code == 400
    assert too_long.get_json()["error"] == "Text too long. Maximum 4096 characters."


def test_tts_returns_wav_audio(
    app: Flask, signed_in: FlaskClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    spoken: dict[str, str] = {}

    async def fake_synthesize(text: str, *, voice: str = "nova") -> bytes:
        spoken.update(text=text, voice=voice)
        return b"RIFF0000WAVE"

    monkeypatch.setattr(app.extensions["realityshift"].openai_gateway, "synthesize", fake_synthesize)

    response = signed_in.post("/api/tts", json={"text": "Keep going"})

    assert response.status_code == 200
    assert response.mimetype == "audio/wav"
    assert response.headers["Content-Length"] == "12"
    assert response.data == b"RIFF0000WAVE"
    assert spoken == {"text": "Keep going", "voice": "nova"}


def test_transcribe_forwards_upload(
    app: Flask, signed_in: FlaskClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    received: dict[str, object] = {}

    async def fake_transcribe(filename: str, content: bytes, content_type: str | None = None) -> str:
        received.update(filename=filename, size=len(content))
        return "I meditated today"

    monkeypatch.setattr(app.extensions["realityshift"].openai_gateway, "transcribe", fake_transcribe)

    response = signed_in.post(
        "/api/transcribe",
        data={"file": (io.BytesIO(b"\x00" * 64), "note.webm", "audio/webm")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    assert response.get_json()["data"] == {"text": "I meditated today"}
    assert received == {"filename": "note.webm", "size": 64}
