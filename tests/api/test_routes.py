"""HTTP routes end to end: owner header, envelopes, status mapping.

Tests:
    - Requests without an owner header are rejected with 401
    - Cats and logs round-trip with camelCase JSON envelopes
    - Deletes require ?confirmed=true (422 otherwise)
    - Foreign resources answer 404, malformed bodies answer 400
    - Summary zero-fills cats; chart omits empty buckets
"""

from datetime import datetime, timezone

import pytest

CAT_PATH = "/api/cats"
LOG_PATH = "/api/logs"


async def _create_cat(client, headers, name="Tama", **fields) -> dict:
    res = await client.post(CAT_PATH, json={"name": name, **fields}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["cat"]


async def _create_log(client, headers, cat_id, type="urine", timestamp=None) -> dict:
    body = {"catId": cat_id, "type": type}
    if timestamp:
        body["timestamp"] = timestamp
    res = await client.post(LOG_PATH, json=body, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["log"]


# ─── Health ──────────────────────────────────────────────────────

async def test_health_needs_no_owner(client):
    """Liveness answers without an owner header."""
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_checks_database(client):
    """Readiness reports the database check."""
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


# ─── Owner resolution ────────────────────────────────────────────

@pytest.mark.parametrize("headers", [{}, {"X-Owner-Id": "   "}])
async def test_missing_owner_is_unauthorized(client, headers):
    """A missing or blank owner header answers 401."""
    res = await client.get(CAT_PATH, headers=headers)
    assert res.status_code == 401
    assert res.json()["type"] == "unauthorized"


# ─── Cats ────────────────────────────────────────────────────────

async def test_cat_lifecycle(client, owner_headers):
    """Create, list, update and get a cat through the API."""
    cat = await _create_cat(
        client, owner_headers, birthDate="2020-04-01T00:00:00Z", weight=4.5,
    )
    assert cat["name"] == "Tama"
    assert cat["ownerId"] == "owner-1"
    assert cat["breed"] is None
    assert cat["weight"] == 4.5
    assert "createdAt" in cat

    res = await client.get(CAT_PATH, headers=owner_headers)
    assert [c["id"] for c in res.json()["cats"]] == [cat["id"]]

    res = await client.put(
        f"{CAT_PATH}/{cat['id']}", json={"breed": "Siamese"}, headers=owner_headers,
    )
    assert res.status_code == 200
    assert res.json()["cat"]["breed"] == "Siamese"
    assert res.json()["cat"]["name"] == "Tama"

    res = await client.get(f"{CAT_PATH}/{cat['id']}", headers=owner_headers)
    assert res.json()["cat"]["breed"] == "Siamese"


async def test_create_cat_validation_error(client, owner_headers):
    """An empty name answers 400 with field and message."""
    res = await client.post(CAT_PATH, json={"name": ""}, headers=owner_headers)
    assert res.status_code == 400
    assert res.json() == {
        "type": "validation", "field": "name", "message": "Name is required",
    }


async def test_malformed_json_reads_as_empty_body(client, owner_headers):
    """Unparseable JSON is treated as an empty body."""
    res = await client.post(
        CAT_PATH, content=b"{not json",
        headers={**owner_headers, "Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["field"] == "name"


async def test_other_owner_cannot_see_cat(client, owner_headers, other_owner_headers):
    """Another owner gets 404 for the cat and an empty list."""
    cat = await _create_cat(client, owner_headers)

    res = await client.get(f"{CAT_PATH}/{cat['id']}", headers=other_owner_headers)
    assert res.status_code == 404
    assert res.json() == {"type": "not_found", "resource": "cat", "id": cat["id"]}

    res = await client.get(CAT_PATH, headers=other_owner_headers)
    assert res.json()["cats"] == []


async def test_delete_cat_requires_confirmation(client, owner_headers):
    """DELETE without confirmed=true answers 422; with it the cat and its logs go."""
    cat = await _create_cat(client, owner_headers)
    await _create_log(client, owner_headers, cat["id"])

    res = await client.delete(f"{CAT_PATH}/{cat['id']}", headers=owner_headers)
    assert res.status_code == 422
    assert res.json() == {"type": "confirmation_required"}

    res = await client.delete(
        f"{CAT_PATH}/{cat['id']}", params={"confirmed": "true"}, headers=owner_headers,
    )
    assert res.status_code == 200
    assert res.json() == {"success": True}

    res = await client.get(LOG_PATH, headers=owner_headers)
    assert res.json()["total"] == 0


# ─── Logs ────────────────────────────────────────────────────────

async def test_log_lifecycle(client, owner_headers):
    """Create, update and delete a log; it is then not found."""
    cat = await _create_cat(client, owner_headers)
    log = await _create_log(
        client, owner_headers, cat["id"], "feces", "2024-01-10T09:30:00+09:00",
    )
    assert log["catId"] == cat["id"]
    assert log["type"] == "feces"
    assert datetime.fromisoformat(log["timestamp"].replace("Z", "+00:00")) == datetime(
        2024, 1, 10, 0, 30, tzinfo=timezone.utc,
    )

    res = await client.put(
        f"{LOG_PATH}/{log['id']}", json={"note": "soft"}, headers=owner_headers,
    )
    assert res.status_code == 200
    assert res.json()["log"]["note"] == "soft"

    res = await client.delete(
        f"{LOG_PATH}/{log['id']}", params={"confirmed": "true"}, headers=owner_headers,
    )
    assert res.json() == {"success": True}

    res = await client.get(f"{LOG_PATH}/{log['id']}", headers=owner_headers)
    assert res.status_code == 404
    assert res.json()["resource"] == "toilet_log"


async def test_log_for_foreign_cat_is_not_found(client, owner_headers, other_owner_headers):
    """Logging against another owner's cat answers 404 for the cat."""
    cat = await _create_cat(client, owner_headers)

    res = await client.post(
        LOG_PATH, json={"catId": cat["id"], "type": "urine"}, headers=other_owner_headers,
    )
    assert res.status_code == 404
    assert res.json()["resource"] == "cat"


async def test_history_pagination_envelope(client, owner_headers):
    """The history envelope carries total, page, limit and totalPages."""
    cat = await _create_cat(client, owner_headers)
    for day in range(1, 6):
        await _create_log(client, owner_headers, cat["id"], timestamp=f"2024-01-0{day}T12:00:00Z")

    res = await client.get(LOG_PATH, params={"page": 2, "limit": 2}, headers=owner_headers)
    body = res.json()
    assert res.status_code == 200
    assert (body["total"], body["page"], body["limit"], body["totalPages"]) == (5, 2, 2, 3)
    assert [log["timestamp"][:10] for log in body["logs"]] == ["2024-01-03", "2024-01-02"]


async def test_history_invalid_limit(client, owner_headers):
    """limit above 100 answers 400."""
    res = await client.get(LOG_PATH, params={"limit": 101}, headers=owner_headers)
    assert res.status_code == 400
    assert res.json()["field"] == "limit"


async def test_history_oversized_page_is_a_validation_error(client, owner_headers):
    """A page beyond the cap answers 400 instead of a server error."""
    res = await client.get(
        LOG_PATH, params={"page": str(2**63)}, headers=owner_headers,
    )
    assert res.status_code == 400
    assert res.json()["field"] == "page"


# ─── Stats ───────────────────────────────────────────────────────

async def test_summary_zero_fills_cats(client, owner_headers):
    """The summary lists idle cats with zero counts."""
    busy = await _create_cat(client, owner_headers, "Busy")
    await _create_cat(client, owner_headers, "Idle")
    await _create_log(client, owner_headers, busy["id"])  # timestamp defaults to now

    res = await client.get("/api/stats/summary", headers=owner_headers)
    body = res.json()
    assert res.status_code == 200
    assert body["date"] == datetime.now(timezone.utc).date().isoformat()
    by_name = {c["catName"]: c for c in body["cats"]}
    assert by_name["Busy"]["urineCount"] == 1
    assert by_name["Idle"]["totalCount"] == 0
    assert body["totalCount"] == 1


async def test_chart_weekly_omits_empty_weeks(client, owner_headers):
    """The weekly chart keys on Mondays and skips empty weeks."""
    cat = await _create_cat(client, owner_headers)
    await _create_log(client, owner_headers, cat["id"], "urine", "2024-01-08T10:00:00Z")
    await _create_log(client, owner_headers, cat["id"], "feces", "2024-01-14T10:00:00Z")
    await _create_log(client, owner_headers, cat["id"], "urine", "2024-02-01T10:00:00Z")

    res = await client.get(
        "/api/stats/chart",
        params={"catId": cat["id"], "period": "week"},
        headers=owner_headers,
    )
    body = res.json()
    assert res.status_code == 200
    assert body["catName"] == "Tama"
    assert body["period"] == "weekly"
    assert body["data"] == [
        {"date": "2024-01-08", "urineCount": 1, "fecesCount": 1, "totalCount": 2},
        {"date": "2024-01-29", "urineCount": 1, "fecesCount": 0, "totalCount": 1},
    ]


async def test_chart_unknown_cat(client, owner_headers):
    """An unknown cat in the chart query answers 404."""
    res = await client.get(
        "/api/stats/chart",
        params={"catId": "3f2b8c1e-7a4d-4e5f-9b6a-1c2d3e4f5a6b"},
        headers=owner_headers,
    )
    assert res.status_code == 404
