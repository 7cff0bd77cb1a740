"""Tests for the HTTP command surface."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from errors import StoreError
from server.app import create_app
from server.commands import CommandFacade


@pytest.mark.integration
class TestRoutes:

    @pytest.fixture(autouse=True)
    def _client(self, commands):
        self.commands = commands
        self.client = TestClient(create_app(commands))

    def test_device_status_and_toggle(self):
        response = self.client.get("/api/device")
        assert response.status_code == 200
        assert response.json()["connected"] is False
        assert response.json()["battery_level"] is None

        response = self.client.post("/api/device/toggle")
        assert response.status_code == 200
        body = response.json()
        assert body["connected"] is True
        assert 0 <= body["battery_level"] < 100

    def test_add_and_list_transcripts(self):
        response = self.client.post("/api/transcripts", json={"title": "A", "content": "x"})
        assert response.status_code == 201
        self.client.post("/api/transcripts", json={"title": "B", "content": "y"})

        response = self.client.get("/api/transcripts")
        assert response.status_code == 200
        body = response.json()
        assert [t["title"] for t in body] == ["B", "A"]
        assert all(t["synced"] is False for t in body)
        assert set(body[0]) == {"id", "title", "content", "created_at", "synced"}

    def test_empty_title_accepted(self):
        response = self.client.post("/api/transcripts", json={"title": "", "content": ""})
        assert response.status_code == 201

    def test_get_single_transcript(self):
        self.client.post("/api/transcripts", json={"title": "A", "content": "x"})
        transcript_id = self.client.get("/api/transcripts").json()[0]["id"]

        response = self.client.get(f"/api/transcripts/{transcript_id}")
        assert response.status_code == 200
        assert response.json()["content"] == "x"

        response = self.client.get(f"/api/transcripts/{transcript_id + 1}")
        assert response.status_code == 404

    def test_mark_synced_and_unsynced_count(self):
        self.client.post("/api/transcripts", json={"title": "A", "content": "x"})
        self.client.post("/api/transcripts", json={"title": "B", "content": "y"})
        assert self.client.get("/api/unsynced-count").json() == {"count": 2}

        transcript_id = self.client.get("/api/transcripts").json()[0]["id"]
        response = self.client.post(f"/api/transcripts/{transcript_id}/sync")
        assert response.status_code == 200
        assert self.client.get("/api/unsynced-count").json() == {"count": 1}

        # unknown ids are not an error
        assert self.client.post("/api/transcripts/9999/sync").status_code == 200

    def test_simulate_sync(self):
        self.client.post("/api/transcripts", json={"title": "A", "content": "x"})
        response = self.client.post("/api/sync")
        assert response.status_code == 200
        assert self.client.get("/api/unsynced-count").json() == {"count": 0}

    def test_store_failure_returns_500(self, registry):
        store = Mock()
        store.list.side_effect = StoreError("database is locked")
        client = TestClient(create_app(CommandFacade(store, registry)))

        response = client.get("/api/transcripts")
        assert response.status_code == 500
        assert "database is locked" in response.json()["detail"]
