"""End-to-end tests for /transaction/* through the ASGI app.

Storage and cache are in-memory fakes (see tests/fakes.py); the clock is
pinned to 2024-01-01 12:30:00 Asia/Shanghai.
"""
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from src.pl_transaction.domain.models import TransactionState

COFFEE = {"amount": 12.50, "title": "coffee", "type": 1, "kind": 2, "currency": 0}
DAY = {"start_at": "2024-01-01", "end_at": "2024-01-01"}


class TestAuth:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/transaction/add"),
            ("POST", "/transaction/update"),
            ("POST", "/transaction/delete"),
            ("GET", "/transaction/list"),
            ("GET", "/transaction/overview"),
        ],
    )
    async def test_missing_key_is_401(self, client, method, path):
        resp = await client.request(method, path, json=COFFEE)
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

    async def test_wrong_key_is_401_without_state_change(self, client, repo, cache):
        resp = await client.post(
            "/transaction/add", json=COFFEE, headers={"X-API-KEY": "nope"}
        )
        assert resp.status_code == 401
        assert repo.rows == {}
        assert cache.invalidations == 0

    async def test_root_is_public(self, client):
        resp = await client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert "Hello" in resp.text

    async def test_health_is_public(self, client):
        resp = await client.get("/health")
        assert resp.json()["status"] == "ok"


class TestResponseTimeHeader:
    async def test_present_on_success(self, auth_client):
        resp = await auth_client.get("/transaction/list", params=DAY)
        assert resp.headers["X-Response-Time"].isdigit()

    async def test_present_on_401(self, client):
        resp = await client.get("/transaction/list", params=DAY)
        assert "X-Response-Time" in resp.headers


class TestAddAndList:
    async def test_add_then_list(self, auth_client, repo):
        resp = await auth_client.post("/transaction/add", json=COFFEE)
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}

        resp = await auth_client.get("/transaction/list", params=DAY)
        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert body["data"] == [
            {"id": 1, "title": "coffee", "amount": "12.50", "type": 1,
             "date": "2024-01-01 12:30:00"},
        ]
        assert repo.rows[1].amount == Decimal("12.50")

    async def test_list_outside_window_is_empty(self, auth_client):
        await auth_client.post("/transaction/add", json=COFFEE)

        resp = await auth_client.get(
            "/transaction/list", params={"start_at": "2024-01-02", "end_at": "2024-01-31"}
        )
        assert resp.json() == {"ok": True, "data": []}

    async def test_list_is_ordered_by_created_at(self, auth_client, repo):
        repo.clock = lambda: datetime(2024, 1, 1, 10, 0, tzinfo=UTC)
        await auth_client.post("/transaction/add", json={**COFFEE, "title": "late"})
        repo.clock = lambda: datetime(2024, 1, 1, 1, 0, tzinfo=UTC)
        await auth_client.post("/transaction/add", json={**COFFEE, "title": "early"})

        resp = await auth_client.get("/transaction/list", params=DAY)
        assert [i["title"] for i in resp.json()["data"]] == ["early", "late"]

    async def test_local_midnight_boundary(self, auth_client, repo):
        # 2024-01-01 23:59:59 Shanghai belongs to Jan 1; one second later is Jan 2
        repo.clock = lambda: datetime(2024, 1, 1, 15, 59, 59, tzinfo=UTC)
        await auth_client.post("/transaction/add", json={**COFFEE, "title": "jan1"})
        repo.clock = lambda: datetime(2024, 1, 1, 16, 0, 0, tzinfo=UTC)
        await auth_client.post("/transaction/add", json={**COFFEE, "title": "jan2"})

        resp = await auth_client.get("/transaction/list", params=DAY)
        assert [i["title"] for i in resp.json()["data"]] == ["jan1"]

    async def test_add_validation_failure_writes_nothing(self, auth_client, repo, cache):
        resp = await auth_client.post("/transaction/add", json={**COFFEE, "amount": -1})
        assert resp.status_code == 400
        assert "error" in resp.json()
        assert repo.rows == {}
        assert cache.invalidations == 0

    async def test_add_missing_field(self, auth_client):
        body = dict(COFFEE)
        del body["currency"]
        resp = await auth_client.post("/transaction/add", json=body)
        assert resp.status_code == 400
        assert any("currency" in e["loc"] for e in resp.json()["error"])

    async def test_add_empty_title_rejected(self, auth_client, repo):
        resp = await auth_client.post("/transaction/add", json={**COFFEE, "title": ""})
        assert resp.status_code == 400
        assert repo.rows == {}


class TestDateValidation:
    @pytest.mark.parametrize(
        "params",
        [
            {"start_at": "2024-1-1", "end_at": "2024-01-01"},
            {"start_at": "2024-01-01", "end_at": "2024-02-30"},
            {"start_at": "2024-01-01"},
            {},
        ],
    )
    async def test_bad_or_missing_dates(self, auth_client, params):
        for path in ("/transaction/list", "/transaction/overview"):
            resp = await auth_client.get(path, params=params)
            assert resp.status_code == 400
            assert "error" in resp.json()


class TestOverview:
    async def test_example(self, auth_client):
        await auth_client.post("/transaction/add", json=COFFEE)

        resp = await auth_client.get("/transaction/overview", params=DAY)
        assert resp.status_code == 200
        assert resp.json() == {
            "ok": True,
            "start_at": "2024-01-01 00:00:00",
            "end_at": "2024-01-01 23:59:59",
            "data": [{"type": 1, "sum": "12.50", "count": 1}],
        }

    async def test_groups_by_type(self, auth_client):
        await auth_client.post("/transaction/add", json=COFFEE)
        await auth_client.post("/transaction/add", json={**COFFEE, "amount": 7.5})
        await auth_client.post("/transaction/add", json={**COFFEE, "type": 0, "amount": 100})

        resp = await auth_client.get("/transaction/overview", params=DAY)
        assert resp.json()["data"] == [
            {"type": 0, "sum": "100.00", "count": 1},
            {"type": 1, "sum": "20.00", "count": 2},
        ]


class TestUpdateAndDelete:
    async def test_amount_update(self, auth_client, repo):
        await auth_client.post("/transaction/add", json=COFFEE)

        resp = await auth_client.post("/transaction/update", json={"id": 1, "amount": 15})
        assert resp.json() == {"ok": True}
        assert repo.rows[1].amount == Decimal("15.00")

    @pytest.mark.parametrize("amount", [0, -3])
    async def test_non_positive_amount_leaves_record(self, auth_client, repo, amount):
        await auth_client.post("/transaction/add", json=COFFEE)

        resp = await auth_client.post("/transaction/update", json={"id": 1, "amount": amount})
        assert resp.status_code == 400
        assert repo.rows[1].amount == Decimal("12.50")

    async def test_amount_rounding_to_zero_leaves_record(self, auth_client, repo):
        await auth_client.post("/transaction/add", json=COFFEE)

        resp = await auth_client.post("/transaction/update", json={"id": 1, "amount": 0.001})
        assert resp.status_code == 400
        assert repo.rows[1].amount == Decimal("12.50")

    async def test_delete_with_stray_amount_still_deletes(self, auth_client, repo):
        await auth_client.post("/transaction/add", json=COFFEE)

        resp = await auth_client.post(
            "/transaction/update", json={"id": 1, "is_delete": True, "amount": -1}
        )
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
        assert repo.rows[1].deleted_at is not None
        assert repo.rows[1].amount == Decimal("12.50")

    async def test_update_unknown_id_still_ok(self, auth_client):
        resp = await auth_client.post("/transaction/update", json={"id": 404, "amount": 1})
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}

    async def test_soft_delete_hides_but_keeps_record(self, auth_client, repo):
        await auth_client.post("/transaction/add", json=COFFEE)

        resp = await auth_client.post("/transaction/update", json={"id": 1, "is_delete": True})
        assert resp.json() == {"ok": True}

        assert 1 in repo.rows
        assert repo.rows[1].state is TransactionState.DELETED
        assert (await auth_client.get("/transaction/list", params=DAY)).json()["data"] == []
        assert (await auth_client.get("/transaction/overview", params=DAY)).json()["data"] == []

    async def test_delete_endpoint_soft_deletes(self, auth_client, repo):
        await auth_client.post("/transaction/add", json=COFFEE)

        resp = await auth_client.post("/transaction/delete", json={"id": 1})
        assert resp.json() == {"ok": True}
        assert repo.rows[1].deleted_at is not None

    async def test_second_delete_keeps_first_timestamp(self, auth_client, repo):
        await auth_client.post("/transaction/add", json=COFFEE)
        await auth_client.post("/transaction/delete", json={"id": 1})
        first = repo.rows[1].deleted_at

        await auth_client.post("/transaction/delete", json={"id": 1})
        assert repo.rows[1].deleted_at == first


class TestCaching:
    async def test_repeat_list_served_from_cache(self, auth_client, repo, cache):
        await auth_client.post("/transaction/add", json=COFFEE)

        first = await auth_client.get("/transaction/list", params=DAY)
        second = await auth_client.get("/transaction/list", params=DAY)

        assert first.content == second.content
        assert repo.list_calls == 1
        assert cache.ttls["transaction:list-2024-01-01-2024-01-01"] == 3600

    async def test_repeat_overview_served_from_cache(self, auth_client, repo):
        await auth_client.post("/transaction/add", json=COFFEE)

        first = await auth_client.get("/transaction/overview", params=DAY)
        second = await auth_client.get("/transaction/overview", params=DAY)

        assert first.content == second.content
        assert repo.summary_calls == 1

    async def test_empty_list_is_not_cached(self, auth_client, repo):
        await auth_client.get("/transaction/list", params=DAY)
        await auth_client.get("/transaction/list", params=DAY)
        assert repo.list_calls == 2

    @pytest.mark.parametrize(
        "path,body",
        [
            ("/transaction/add", {**COFFEE, "title": "tea", "amount": 3}),
            ("/transaction/update", {"id": 1, "amount": 99}),
            ("/transaction/update", {"id": 1, "is_delete": True}),
            ("/transaction/delete", {"id": 1}),
        ],
    )
    async def test_writes_invalidate_cached_reads(self, auth_client, repo, cache, path, body):
        await auth_client.post("/transaction/add", json=COFFEE)
        stale_list = (await auth_client.get("/transaction/list", params=DAY)).json()
        stale_overview = (await auth_client.get("/transaction/overview", params=DAY)).json()
        assert cache.store

        resp = await auth_client.post(path, json=body)
        assert resp.status_code == 200
        assert cache.store == {}

        fresh_list = (await auth_client.get("/transaction/list", params=DAY)).json()
        fresh_overview = (await auth_client.get("/transaction/overview", params=DAY)).json()
        assert fresh_list != stale_list
        assert fresh_overview != stale_overview
        assert repo.list_calls == 2
        assert repo.summary_calls == 2


class TestErrorBoundary:
    async def test_downstream_failure_is_400_with_detail(self, auth_client, repo):
        async def _boom(*args, **kwargs):
            raise RuntimeError("connection refused")

        repo.list_active_between = _boom

        resp = await auth_client.get("/transaction/list", params=DAY)
        assert resp.status_code == 400
        assert resp.json() == {"error": "connection refused"}
        assert "X-Response-Time" in resp.headers

    async def test_failed_write_rolls_back(self, auth_client, repo, db_session, cache):
        async def _boom(*args, **kwargs):
            raise RuntimeError("insert failed")

        repo.insert = _boom

        resp = await auth_client.post("/transaction/add", json=COFFEE)
        assert resp.status_code == 400
        assert resp.json() == {"error": "insert failed"}
        db_session.rollback.assert_awaited_once()
        assert cache.invalidations == 0
