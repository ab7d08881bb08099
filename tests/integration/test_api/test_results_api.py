"""Integration tests for results, statistics and the live results socket."""

from datetime import UTC, datetime

import pytest
from fastapi import FastAPI, WebSocketDisconnect
from fastapi.testclient import TestClient
from httpx import AsyncClient

from ballot_api.api.v1.results import get_change_feed, results_router
from ballot_api.core.change_feed import ChangeAction, ChangeFeed, Collection
from ballot_api.core.dependencies import get_results_loader
from ballot_api.models.election_config import ElectionConfig
from ballot_api.models.voter import Voter
from ballot_api.schemas.results import ResultsResponse, TurnoutResponse


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def _vote(client: AsyncClient, voter_id: str, choices: list[tuple[str, str]]) -> None:
    login = await client.post("/api/v1/session", json={"voter_id": voter_id})
    token = login.json()["access_token"]
    for position_id, candidate_id in choices:
        response = await client.post(
            "/api/v1/ballot/votes",
            json={"position_id": position_id, "candidate_id": candidate_id},
            headers=_auth(token),
        )
        assert response.status_code == 201


class TestResults:
    """Tests for GET /results and /results/stats."""

    async def test_tally_after_voting(
        self, client: AsyncClient, voter: Voter, ballot: dict, open_election: ElectionConfig
    ) -> None:
        await _vote(
            client,
            voter.id,
            [(str(ballot["president"].id), str(ballot["alice"].id)), (str(ballot["treasurer"].id), "PASS")],
        )

        response = await client.get("/api/v1/results")
        assert response.status_code == 200
        body = response.json()
        rows = {row["name"]: row for row in body["candidates"]}
        assert rows["Alice"]["vote_count"] == 1
        assert rows["Alice"]["percentage"] == 100.0
        assert rows["Carol"]["percentage"] == 0.0
        assert [p["abstentions"] for p in body["positions"]] == [0, 1]
        assert body["turnout"]["unique_voters"] == 1
        assert body["turnout"]["votes_cast"] == 2

    async def test_empty_election(self, client: AsyncClient) -> None:
        body = (await client.get("/api/v1/results")).json()
        assert body["candidates"] == []
        assert body["turnout"]["turnout_rate"] == 0.0

    async def test_stats_requires_admin(self, client: AsyncClient) -> None:
        assert (await client.get("/api/v1/results/stats")).status_code == 401

    async def test_stats(
        self, client: AsyncClient, committee_token: str, ballot: dict, open_election: ElectionConfig
    ) -> None:
        response = await client.get("/api/v1/results/stats", headers=_auth(committee_token))
        assert response.status_code == 200
        body = response.json()
        assert body["positions"] == 2
        assert body["candidates"] == 4
        assert body["status"] == "Active"


class TestLiveResults:
    """Tests for the /results/live websocket."""

    def test_pushes_on_connect_and_on_change(self) -> None:
        feed = ChangeFeed()
        calls: list[int] = []

        async def load() -> ResultsResponse:
            calls.append(1)
            return ResultsResponse(
                candidates=[],
                positions=[],
                turnout=TurnoutResponse(total_voters=3, votes_cast=len(calls), unique_voters=0, turnout_rate=0.0),
                generated_at=datetime.now(UTC),
            )

        app = FastAPI()
        app.include_router(results_router)
        app.dependency_overrides[get_results_loader] = lambda: load
        app.dependency_overrides[get_change_feed] = lambda: feed

        with TestClient(app) as client, client.websocket_connect("/results/live") as websocket:
            first = websocket.receive_json()
            assert first["turnout"]["votes_cast"] == 1
            assert feed.subscriber_count(Collection.VOTES) == 1

            feed.publish(Collection.VOTES, ChangeAction.CREATED, "vote-1")
            second = websocket.receive_json()
            assert second["turnout"]["votes_cast"] == 2

        for collection in (Collection.VOTES, Collection.POSITIONS, Collection.CANDIDATES):
            assert feed.subscriber_count(collection) == 0

    def test_failed_reload_closes_connection(self) -> None:
        feed = ChangeFeed()
        calls: list[int] = []

        async def load() -> ResultsResponse:
            calls.append(1)
            if len(calls) > 1:
                raise RuntimeError("database unavailable")
            return ResultsResponse(
                candidates=[],
                positions=[],
                turnout=TurnoutResponse(total_voters=0, votes_cast=0, unique_voters=0, turnout_rate=0.0),
                generated_at=datetime.now(UTC),
            )

        app = FastAPI()
        app.include_router(results_router)
        app.dependency_overrides[get_results_loader] = lambda: load
        app.dependency_overrides[get_change_feed] = lambda: feed

        with TestClient(app) as client, client.websocket_connect("/results/live") as websocket:
            websocket.receive_json()
            feed.publish(Collection.POSITIONS, ChangeAction.UPDATED, "pos-1")
            with pytest.raises(WebSocketDisconnect) as excinfo:
                websocket.receive_json()
            assert excinfo.value.code == 1011

        assert feed.subscriber_count(Collection.POSITIONS) == 0
