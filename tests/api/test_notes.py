"""Tests for notes endpoints."""


class TestNotesEndpoints:
    """Test notes endpoints."""

    def test_root_and_health(self, api_client):
        assert api_client.get("/").status_code == 200

        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_create_note(self, api_client, sample_note_data):
        """Test creating a note through upsert."""
        response = api_client.post("/notes", json=sample_note_data)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "note-1"
        assert data["title"] == sample_note_data["title"]
        assert data["mood"] == 7
        assert data["status"] == "in-progress"
        assert data["created_date"].startswith("2024-05-01T12:00:00")

    def test_get_note(self, api_client, sample_note_data):
        api_client.post("/notes", json=sample_note_data)

        response = api_client.get("/notes/note-1")

        assert response.status_code == 200
        assert response.json()["content"] == sample_note_data["content"]

    def test_get_missing_note(self, api_client):
        response = api_client.get("/notes/nope")

        assert response.status_code == 404
        assert response.json()["detail"] == "Note not found"

    def test_save_requires_id(self, api_client, sample_note_data):
        """Test empty ID is rejected."""
        response = api_client.post("/notes", json={**sample_note_data, "id": ""})

        assert response.status_code == 400

    def test_save_requires_title(self, api_client, sample_note_data):
        """Test empty title is rejected."""
        response = api_client.post("/notes", json={**sample_note_data, "title": ""})

        assert response.status_code == 400
        assert "title" in response.json()["detail"].lower()

    def test_save_rejects_self_link(self, api_client, sample_note_data):
        response = api_client.post("/notes", json={**sample_note_data, "linked_notes": ["note-1"]})

        assert response.status_code == 400

    def test_save_rejects_bad_mood(self, api_client, sample_note_data):
        response = api_client.post("/notes", json={**sample_note_data, "mood": 11})

        assert response.status_code == 422

    def test_list_notes_most_recent_first(self, api_client, sample_note_data):
        """Test listing is ordered by modified date, newest first."""
        api_client.post("/notes", json=sample_note_data)
        api_client.post(
            "/notes",
            json={
                **sample_note_data,
                "id": "note-2",
                "title": "Newer",
                "modified_date": "2024-06-01T12:00:00+00:00",
            },
        )

        response = api_client.get("/notes")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [note["id"] for note in data["notes"]] == ["note-2", "note-1"]

    def test_update_replaces_links(self, api_client, sample_note_data):
        """Test an upsert fully replaces the link set."""
        for note_id in ("note-2", "note-3"):
            api_client.post("/notes", json={**sample_note_data, "id": note_id})
        api_client.post("/notes", json={**sample_note_data, "linked_notes": ["note-2", "note-3"]})

        response = api_client.put(
            "/notes/note-1", json={**sample_note_data, "linked_notes": ["note-3"]}
        )

        assert response.status_code == 200
        assert api_client.get("/notes/note-1").json()["linked_notes"] == ["note-3"]

    def test_update_id_mismatch(self, api_client, sample_note_data):
        response = api_client.put("/notes/other", json=sample_note_data)

        assert response.status_code == 400
        assert response.json()["detail"] == "Note ID mismatch"

    def test_delete_cascades_links(self, api_client, sample_note_data):
        """Test deleting a note removes links in both directions."""
        api_client.post("/notes", json={**sample_note_data, "id": "A", "linked_notes": []})
        api_client.post("/notes", json={**sample_note_data, "id": "B", "linked_notes": ["A"]})
        api_client.post("/notes", json={**sample_note_data, "id": "A", "linked_notes": ["B"]})

        response = api_client.delete("/notes/B")

        assert response.status_code == 204
        assert api_client.get("/notes/B").status_code == 404
        assert api_client.get("/notes/A").json()["linked_notes"] == []

        graph = api_client.get("/notes/graph").json()
        assert [node["id"] for node in graph["nodes"]] == ["A"]
        assert graph["edges"] == []

    def test_delete_missing_note(self, api_client):
        assert api_client.delete("/notes/nope").status_code == 404

    def test_graph(self, api_client, sample_note_data):
        """Test the server-side graph projection."""
        api_client.post("/notes", json={**sample_note_data, "id": "B"})
        api_client.post(
            "/notes",
            json={
                **sample_note_data,
                "id": "A",
                "linked_notes": ["B"],
                "modified_date": "2024-06-01T12:00:00+00:00",
            },
        )

        response = api_client.get("/notes/graph", params={"active_id": "B"})

        assert response.status_code == 200
        graph = response.json()
        assert graph["nodes"][0] == {
            "id": "A",
            "title": "Test Note",
            "position": {"x": 100, "y": 100},
            "active": False,
        }
        assert graph["nodes"][1]["position"] == {"x": 400, "y": 100}
        assert graph["nodes"][1]["active"] is True
        assert graph["edges"] == [{"id": "A->B", "source": "A", "target": "B"}]
