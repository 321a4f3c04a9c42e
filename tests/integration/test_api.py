"""
Integration tests for the HTTP API.

Runs the FastAPI app in-process against a temporary data directory.

Run: pytest tests/integration/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from lexicards.api.main import create_app

pytestmark = pytest.mark.integration


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


@pytest.fixture
def logged_in(client):
    assert client.post("/api/auth/signup", json={"username": "anna", "password": "pw"}).status_code == 200
    assert client.post("/api/auth/login", json={"username": "anna", "password": "pw"}).status_code == 200
    return client


def _add(client, german, arabic, **extra):
    response = client.post("/api/cards", json={"german": german, "arabic": arabic, **extra})
    assert response.status_code == 200, response.text
    return response.json()


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").json()["service"] == "lexicards"
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["components"]["storage"] == "ok"


class TestAuth:
    def test_signup_requires_fields(self, client):
        assert client.post("/api/auth/signup", json={"username": "anna"}).status_code == 400

    def test_duplicate_signup(self, client):
        client.post("/api/auth/signup", json={"username": "anna", "password": "pw"})
        response = client.post("/api/auth/signup", json={"username": "anna", "password": "x"})
        assert response.status_code == 400
        assert response.json()["detail"] == "User already exists"

    def test_bad_login(self, client):
        client.post("/api/auth/signup", json={"username": "anna", "password": "pw"})
        assert client.post("/api/auth/login", json={"username": "anna", "password": "no"}).status_code == 401

    def test_me_and_logout(self, logged_in):
        assert logged_in.get("/api/auth/me").json() == {"authenticated": True, "user": {"username": "anna"}}
        logged_in.post("/api/auth/logout")
        assert logged_in.get("/api/auth/me").json() == {"authenticated": False}
        assert logged_in.get("/api/cards").status_code == 401

    def test_forged_cookie_rejected(self, client):
        client.cookies.set("session", "anna.deadbeef")
        assert client.get("/api/cards").status_code == 401


class TestCards:
    def test_unauthenticated(self, client):
        assert client.get("/api/cards").status_code == 401
        assert client.post("/api/cards", json={"german": "a", "arabic": "b"}).status_code == 401

    def test_crud(self, logged_in):
        card = _add(logged_in, "Apfel", "تفاحة", tags=["food"], category="A1-1")
        assert card["hasAudio"] is False

        listing = logged_in.get("/api/cards").json()
        assert listing["total"] == 1
        assert listing["cards"][0]["german"] == "Apfel"
        assert listing["categories"] == ["A1-1"]

        updated = logged_in.put(f"/api/cards/{card['id']}", json={"german": "Äpfel", "arabic": "تفاح"})
        assert updated.status_code == 200
        assert updated.json()["german"] == "Äpfel"
        assert updated.json()["category"] == "General"

        assert logged_in.delete(f"/api/cards/{card['id']}").status_code == 200
        assert logged_in.get("/api/cards").json()["total"] == 0
        assert logged_in.delete(f"/api/cards/{card['id']}").status_code == 404

    def test_missing_fields(self, logged_in):
        response = logged_in.post("/api/cards", json={"german": "Apfel"})
        assert response.status_code == 400
        assert response.json()["detail"] == "German and Arabic text required"
        assert logged_in.put("/api/cards/x", json={"german": "a"}).status_code == 400

    def test_update_unknown(self, logged_in):
        assert logged_in.put("/api/cards/nope", json={"german": "a", "arabic": "b"}).status_code == 404

    def test_search_and_filter(self, logged_in):
        _add(logged_in, "Apfel", "تفاحة", category="A1-1")
        _add(logged_in, "Haus", "بيت", category="A1-2", tags=["home"])
        assert [c["german"] for c in logged_in.get("/api/cards", params={"search": "HOME"}).json()["cards"]] == ["Haus"]
        assert [c["german"] for c in logged_in.get("/api/cards", params={"category": "A1-1"}).json()["cards"]] == ["Apfel"]
        assert [c["german"] for c in logged_in.get("/api/cards").json()["cards"]] == ["Haus", "Apfel"]

    def test_categories_endpoint(self, logged_in):
        _add(logged_in, "Apfel", "تفاحة", category="B2-1")
        body = logged_in.get("/api/cards/categories").json()
        assert body["used"] == ["B2-1"]
        assert "General" in body["presets"]


    def test_corrupt_card_file_gives_logged_500(self, logged_in, settings):
        settings.cards_dir.mkdir(parents=True, exist_ok=True)
        (settings.cards_dir / "anna.json").write_text("{not json", encoding="utf-8")
        assert logged_in.get("/api/cards").status_code == 500
        response = logged_in.get("/api/cards/categories")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to load categories"


class TestAudio:
    def test_upload_play_delete(self, logged_in):
        card = _add(logged_in, "Apfel", "تفاحة")
        upload = logged_in.post(f"/api/audio/{card['id']}", files={"audio": ("a.webm", b"\x1a\x45\xdf\xa3", "audio/webm")})
        assert upload.json() == {"success": True}
        assert logged_in.get("/api/cards").json()["cards"][0]["hasAudio"] is True

        clip = logged_in.get(f"/api/audio/{card['id']}")
        assert clip.status_code == 200
        assert clip.content == b"\x1a\x45\xdf\xa3"
        assert clip.headers["content-type"] == "audio/webm"

        assert logged_in.delete(f"/api/audio/{card['id']}").json() == {"success": True}
        assert logged_in.get(f"/api/audio/{card['id']}").status_code == 404
        assert logged_in.get("/api/cards").json()["cards"][0]["hasAudio"] is False

    def test_upload_before_card_exists(self, logged_in):
        response = logged_in.post("/api/audio/pending-id", files={"audio": ("a.webm", b"abc", "audio/webm")})
        assert response.status_code == 200
        assert logged_in.get("/api/audio/pending-id").content == b"abc"

    def test_upload_with_control_character_id(self, logged_in):
        response = logged_in.post("/api/audio/bad%00id", files={"audio": ("a.webm", b"abc", "audio/webm")})
        assert response.status_code == 400

    def test_upload_without_file(self, logged_in):
        assert logged_in.post("/api/audio/x", data={"other": "1"}).status_code == 400

    def test_requires_login(self, client):
        assert client.get("/api/audio/x").status_code == 401


class TestPractice:
    @pytest.fixture
    def deck(self, logged_in):
        for german, arabic in [("Apfel", "تفاحة"), ("Haus", "بيت"), ("Buch", "كتاب"), ("Wasser", "ماء"), ("Tür", "باب")]:
            _add(logged_in, german, arabic)
        return {"تفاحة": "Apfel", "بيت": "Haus", "كتاب": "Buch", "ماء": "Wasser", "باب": "Tür"}

    def test_full_session(self, logged_in, deck):
        state = logged_in.post("/api/practice", json={"limit": 3}).json()
        assert state["state"] == "active"
        assert state["queue_length"] == 3
        assert "term" not in state["current_card"]

        for i in range(3):
            meaning = state["current_card"]["meaning"]
            answer = deck[meaning] if i < 2 else "falsch"
            state = logged_in.post("/api/practice/submit", json={"answer": answer}).json()
            assert state["current_card"]["term"] == deck[meaning]
            state = logged_in.post("/api/practice/advance").json()

        assert state["state"] == "results"
        assert state["score"] == {"correct": 2, "total": 3}
        assert state["accuracy"] == 67
        assert state["errors"][0]["user_answer"] == "falsch"

    def test_double_submit_counts_once(self, logged_in, deck):
        logged_in.post("/api/practice", json={"limit": 2})
        logged_in.post("/api/practice/submit", json={"answer": "x"})
        state = logged_in.post("/api/practice/submit", json={"answer": "y"}).json()
        assert state["score"]["total"] == 1
        assert state["last_answer"] == "x"

        state = logged_in.post("/api/practice/retype").json()
        assert state["feedback"] == "none"

    def test_all_cards_and_custom_string(self, logged_in, deck):
        assert logged_in.post("/api/practice", json={"limit": None}).json()["queue_length"] == 5
        assert logged_in.post("/api/practice", json={"limit": "2"}).json()["queue_length"] == 2

    def test_invalid_limit(self, logged_in, deck):
        assert logged_in.post("/api/practice", json={"limit": 0}).status_code == 400
        assert logged_in.post("/api/practice", json={"limit": "abc"}).status_code == 400
        assert logged_in.get("/api/practice").json()["state"] == "setup"

    def test_rejected_start_keeps_running_session(self, logged_in, deck):
        logged_in.post("/api/practice", json={"limit": 2})
        logged_in.post("/api/practice/submit", json={"answer": "x"})

        assert logged_in.post("/api/practice", json={"limit": "abc"}).status_code == 400
        assert logged_in.post("/api/practice", json={"limit": 0}).status_code == 400

        state = logged_in.get("/api/practice").json()
        assert state["state"] == "active"
        assert state["queue_length"] == 2
        assert state["score"] == {"correct": 0, "total": 1}

    def test_no_cards(self, logged_in):
        assert logged_in.post("/api/practice", json={"limit": 5}).status_code == 409
        assert logged_in.get("/api/practice").json()["available_cards"] == 0

    def test_actions_without_session(self, logged_in):
        assert logged_in.post("/api/practice/submit", json={"answer": "x"}).status_code == 404

    def test_wrong_state(self, logged_in, deck):
        logged_in.get("/api/practice")
        assert logged_in.post("/api/practice/advance").status_code == 409

    def test_hint_and_exit(self, logged_in, deck):
        logged_in.post("/api/practice", json={"limit": 2})
        state = logged_in.post("/api/practice/hint").json()
        assert state["current_card"]["has_hint"] is False
        state = logged_in.post("/api/practice/exit").json()
        assert state["state"] == "setup"
        assert state["current_card"] is None
