"""
Unit tests for the flat-file stores.

Run: pytest tests/unit/test_storage.py -v
"""

import hashlib
import json

import pytest

from lexicards.models import CardCreate, CardUpdate
from lexicards.storage import (
    AudioNotFoundError,
    AudioStore,
    CardNotFoundError,
    CardStore,
    InvalidCredentialsError,
    InvalidUsernameError,
    StorageError,
    UserExistsError,
    UserStore,
)
from lexicards.storage.json_store import JsonFileStore


@pytest.fixture
def users(settings):
    return UserStore(settings.users_file, hash_iterations=1000)


@pytest.fixture
def audio(settings):
    return AudioStore(settings.audio_dir)


@pytest.fixture
def cards(settings, audio):
    return CardStore(settings.cards_dir, audio)


class TestJsonFileStore:
    def test_missing_file_returns_default_copy(self, tmp_path):
        store = JsonFileStore(tmp_path / "x.json", default=[])
        first = store.read()
        first.append(1)
        assert store.read() == []

    def test_modify_writes_back(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "x.json", default={})
        with store.modify() as data:
            data["k"] = "ü"
        raw = (tmp_path / "nested" / "x.json").read_text(encoding="utf-8")
        assert json.loads(raw) == {"k": "ü"}
        assert "ü" in raw

    def test_modify_skips_write_on_error(self, tmp_path):
        store = JsonFileStore(tmp_path / "x.json", default=[])
        store.write([1])
        with pytest.raises(RuntimeError):
            with store.modify() as data:
                data.append(2)
                raise RuntimeError("boom")
        assert store.read() == [1]

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "x.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileStore(path, default=[]).read()


class TestUserStore:
    def test_signup_and_login(self, users):
        users.create("anna", "pw")
        assert users.authenticate("anna", "pw") == "anna"

    def test_password_not_stored_in_clear(self, users, settings):
        users.create("anna", "secret")
        assert "secret" not in settings.users_file.read_text(encoding="utf-8")

    def test_duplicate_rejected(self, users):
        users.create("anna", "pw")
        with pytest.raises(UserExistsError):
            users.create("anna", "other")

    def test_wrong_password(self, users):
        users.create("anna", "pw")
        with pytest.raises(InvalidCredentialsError):
            users.authenticate("anna", "nope")

    def test_unknown_user(self, users):
        with pytest.raises(InvalidCredentialsError):
            users.authenticate("ghost", "pw")

    @pytest.mark.parametrize("name", ["", "../etc", "a/b", ".hidden", "x" * 65])
    def test_unsafe_usernames_rejected(self, users, name):
        with pytest.raises(InvalidUsernameError):
            users.create(name, "pw")

    def test_empty_password_rejected(self, users):
        with pytest.raises(ValueError):
            users.create("anna", "")

    def test_legacy_sha256_hash_verifies_and_upgrades(self, users, settings):
        legacy = hashlib.sha256(b"pw").hexdigest()
        settings.users_file.parent.mkdir(parents=True, exist_ok=True)
        settings.users_file.write_text(json.dumps([{"username": "old", "password": legacy}]), encoding="utf-8")

        assert users.authenticate("old", "pw") == "old"
        stored = users.get("old")["password"]
        assert stored.startswith("pbkdf2:sha256:")
        assert users.authenticate("old", "pw") == "old"


class TestCardStore:
    def test_missing_file_means_no_cards(self, cards):
        assert cards.list_cards("anna") == []

    def test_add_applies_defaults(self, cards):
        card = cards.add_card("anna", CardCreate(german="Apfel", arabic="تفاحة"))
        assert card.id
        assert card.category == "General"
        assert card.type == "word"
        assert card.hint == ""
        assert card.created_at is not None
        assert [c.model_dump() for c in cards.list_cards("anna")] == [card.model_dump()]

    def test_add_keeps_client_id(self, cards):
        card = cards.add_card("anna", CardCreate(id="fixed", german="Haus", arabic="بيت"))
        assert card.id == "fixed"

    def test_file_uses_original_field_names(self, cards, settings):
        cards.add_card("anna", CardCreate(german="Apfel", arabic="تفاحة", tags=["food"]))
        raw = json.loads((settings.cards_dir / "anna.json").read_text(encoding="utf-8"))[0]
        assert raw["german"] == "Apfel"
        assert raw["arabic"] == "تفاحة"
        assert raw["hasAudio"] is False
        assert "createdAt" in raw

    def test_update_keeps_audio_and_type(self, cards):
        card = cards.add_card("anna", CardCreate(german="Apfel", arabic="تفاحة", hasAudio=True, type="phrase"))
        updated = cards.update_card("anna", card.id, CardUpdate(german="Äpfel", arabic="تفاح"))
        assert updated.term == "Äpfel"
        assert updated.has_audio is True
        assert updated.type == "phrase"
        assert updated.updated_at is not None
        assert cards.get_card("anna", card.id).term == "Äpfel"

    def test_update_unknown_card(self, cards):
        with pytest.raises(CardNotFoundError):
            cards.update_card("anna", "nope", CardUpdate(german="a", arabic="b"))

    def test_delete_removes_card_and_audio(self, cards, audio):
        card = cards.add_card("anna", CardCreate(german="Apfel", arabic="تفاحة"))
        audio.save("anna", card.id, b"RIFF")
        assert cards.delete_card("anna", card.id) is True
        assert cards.list_cards("anna") == []
        assert not audio.exists("anna", card.id)

    def test_delete_unknown_card(self, cards):
        assert cards.delete_card("anna", "nope") is False

    def test_users_are_isolated(self, cards):
        cards.add_card("anna", CardCreate(german="Apfel", arabic="تفاحة"))
        assert cards.list_cards("ben") == []

    def test_categories_in_first_seen_order(self, cards):
        for cat in ["B1-1", "A1-1", "B1-1"]:
            cards.add_card("anna", CardCreate(german="x", arabic="y", category=cat))
        assert cards.categories("anna") == ["B1-1", "A1-1"]

    def test_set_has_audio(self, cards):
        card = cards.add_card("anna", CardCreate(german="Apfel", arabic="تفاحة"))
        assert cards.set_has_audio("anna", card.id, True).has_audio is True
        assert cards.get_card("anna", card.id).has_audio is True

    def test_loads_legacy_card_files(self, cards, settings):
        settings.cards_dir.mkdir(parents=True)
        (settings.cards_dir / "anna.json").write_text(
            json.dumps([{"id": "1", "german": "Tür", "arabic": "باب", "category": "category", "tags": None}]),
            encoding="utf-8",
        )
        card = cards.list_cards("anna")[0]
        assert card.term == "Tür"
        assert card.tags == []
        assert card.has_audio is False


class TestAudioStore:
    def test_save_load_delete(self, audio):
        audio.save("anna", "c1", b"abc")
        assert audio.load("anna", "c1") == b"abc"
        assert audio.path_for("anna", "c1").suffix == ".webm"
        assert audio.delete("anna", "c1") is True
        assert audio.delete("anna", "c1") is False

    def test_missing_clip(self, audio):
        with pytest.raises(AudioNotFoundError):
            audio.load("anna", "nothing")

    def test_card_id_cannot_escape_directory(self, audio, settings):
        path = audio.path_for("anna", "a/../../evil")
        assert path.parent == settings.audio_dir / "anna"
        with pytest.raises(AudioNotFoundError):
            audio.path_for("anna", "../evil")

    def test_control_characters_rejected(self, audio):
        for card_id in ["a\x00b", "tab\tid", "bell\x07", "del\x7f"]:
            with pytest.raises(AudioNotFoundError):
                audio.save("anna", card_id, b"abc")
