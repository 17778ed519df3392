import asyncio
import time

import pytest
from httpx import ASGITransport, AsyncClient

from fakes import make_response
from main import create_app
from utils.storage import InMemoryStorage

pytestmark = pytest.mark.anyio

GENERATE_BODY = {"currentSkills": "Python", "targetGoal": "Data Scientist", "performanceSummary": ""}


async def _generate(async_client, fake_client, payload=None):
    fake_client.replies.append(payload if payload is not None else make_response(2, 3))
    resp = await async_client.post("/generate-learning-path", json=GENERATE_BODY)
    assert resp.status_code == 200
    return resp.json()


async def test_health(async_client):
    resp = await async_client.get("/health")
    assert resp.json() == {"ok": True}


async def test_generate_normalizes_and_persists(async_client, fake_client, store):
    body = await _generate(async_client, fake_client)

    assert body["success"] is True
    path = body["data"]
    assert path["id"].startswith("path-")
    assert len(path["phases"]) == 2
    steps = [s for p in path["phases"] for s in p["steps"]]
    assert len(steps) == 6
    assert all(s["completed"] is False and s["id"] for s in steps)
    assert path["journalEntries"] == []
    assert store.get_by_id(path["id"]).model_dump(mode="json") == path


async def test_insufficient_input_is_not_persisted(async_client, fake_client, store):
    message = "Insufficient information provided. Please provide more details."
    body = await _generate(
        async_client, fake_client, {"error": message, "pathTitle": "Error Creating Path", "phases": []},
    )

    assert body["success"] is False
    assert body["code"] == "InsufficientInput"
    assert body["message"] == message
    assert store.list() == []


async def test_empty_phases_without_error_is_not_persisted(async_client, fake_client, store):
    body = await _generate(async_client, fake_client, {"pathTitle": "Nothing", "phases": []})

    assert body["success"] is False
    assert body["code"] == "InsufficientInput"
    assert store.list() == []


async def test_generation_in_flight_rejects_second_request(async_client, app, fake_client):
    with app.state.generation_flag.hold():
        resp = await async_client.post("/generate-learning-path", json=GENERATE_BODY)

    assert resp.status_code == 409
    assert resp.json()["code"] == "InFlight"
    assert fake_client.calls == []


async def test_list_paths_newest_first(async_client, fake_client):
    first = (await _generate(async_client, fake_client, make_response(title="First")))["data"]
    second = (await _generate(async_client, fake_client, make_response(title="Second")))["data"]

    resp = await async_client.get("/learning-paths")
    ids = [p["id"] for p in resp.json()["data"]]

    expected = sorted([first, second], key=lambda p: p["createdAt"], reverse=True)
    assert ids == [p["id"] for p in expected]


async def test_get_unknown_path_is_404(async_client):
    resp = await async_client.get("/learning-paths/path-0-missing")

    assert resp.status_code == 404
    assert resp.json()["success"] is False
    assert resp.json()["code"] == "PathNotFound"


async def test_step_completion_and_progress(async_client, fake_client, store):
    path = (await _generate(async_client, fake_client))["data"]

    resp = await async_client.patch(f"/learning-paths/{path['id']}/steps/step_0_0", json={"completed": True})
    updated = resp.json()["data"]

    assert updated["phases"][0]["steps"][0]["completed"] is True
    assert updated["updatedAt"] > path["updatedAt"]
    assert store.get_by_id(path["id"]).phases[0].steps[0].completed is True

    progress = (await async_client.get(f"/learning-paths/{path['id']}/progress")).json()["data"]
    assert progress == {"pathId": path["id"], "progress": 17, "completedSteps": 1, "totalSteps": 6}


async def test_unknown_step_is_404(async_client, fake_client):
    path = (await _generate(async_client, fake_client))["data"]

    resp = await async_client.patch(f"/learning-paths/{path['id']}/steps/missing", json={"completed": True})

    assert resp.status_code == 404
    assert resp.json()["code"] == "StepNotFound"


async def test_journal_entries(async_client, fake_client, store):
    path = (await _generate(async_client, fake_client))["data"]
    base = f"/learning-paths/{path['id']}/journal-entries"

    rejected = await async_client.post(base, json={"date": "2026-10-01", "title": " "})
    assert rejected.status_code == 400
    assert rejected.json()["code"] == "ValidationError"
    assert store.get_by_id(path["id"]).journalEntries == []

    entry = (await async_client.post(base, json={"date": "2026-10-01", "title": "Week 1 done"})).json()["data"]
    assert entry["title"] == "Week 1 done"

    unconfirmed = await async_client.delete(f"{base}/{entry['id']}")
    assert unconfirmed.status_code == 409
    assert len(store.get_by_id(path["id"]).journalEntries) == 1

    confirmed = await async_client.delete(f"{base}/{entry['id']}", params={"confirm": "true"})
    assert confirmed.json()["data"]["journalEntries"] == []


async def test_delete_path_requires_confirmation(async_client, fake_client, store):
    path = (await _generate(async_client, fake_client))["data"]

    unconfirmed = await async_client.delete(f"/learning-paths/{path['id']}")
    assert unconfirmed.status_code == 409
    assert store.get_by_id(path["id"]) is not None

    confirmed = await async_client.delete(f"/learning-paths/{path['id']}", params={"confirm": "true"})
    assert confirmed.json()["success"] is True
    assert store.get_by_id(path["id"]) is None

    again = await async_client.delete(f"/learning-paths/{path['id']}", params={"confirm": "true"})
    assert again.status_code == 404


async def test_assistant_ask(async_client, fake_client):
    fake_client.replies.append("Start with linear algebra.")

    resp = await async_client.post("/assistant/ask", json={"query": "Where to start?", "context": "ML Path"})

    assert resp.json()["data"] == {"answer": "Start with linear algebra."}
    assert "ML Path" in fake_client.calls[0]["contents"]


async def test_assistant_blank_query(async_client, fake_client):
    resp = await async_client.post("/assistant/ask", json={"query": "  "})

    assert resp.json()["success"] is False
    assert fake_client.calls == []


class SlowStorage(InMemoryStorage):
    def get_item(self, key):
        time.sleep(0.05)
        return super().get_item(key)


async def test_concurrent_step_updates_are_all_kept(fake_client):
    app = create_app(model_client=fake_client, storage=SlowStorage())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        path = (await _generate(client, fake_client, make_response(2, 3)))["data"]
        step_ids = [s["id"] for p in path["phases"] for s in p["steps"]]

        responses = await asyncio.gather(*[
            client.patch(f"/learning-paths/{path['id']}/steps/{step_id}", json={"completed": True})
            for step_id in step_ids
        ])
        assert all(r.status_code == 200 for r in responses)

        progress = (await client.get(f"/learning-paths/{path['id']}/progress")).json()["data"]
    assert progress["completedSteps"] == 6
    assert progress["progress"] == 100
