import pytest

from thanos_finance.database.storage import (
    JsonFileStorage, MemoryStorage, StorageError, StorageReadError
)


class TestJsonFileStorage:
    def test_missing_key_reads_none(self, tmp_path):
        assert JsonFileStorage(tmp_path).read("thanos_habits") is None

    def test_write_creates_one_file_per_key(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "data")
        storage.write("thanos_habits", "[]")
        storage.write("thanos_stats", '{"xp": 10}')

        assert (tmp_path / "data" / "thanos_habits.json").read_text(encoding="utf-8") == "[]"
        assert storage.read("thanos_stats") == '{"xp": 10}'
        assert not list((tmp_path / "data").glob("*.tmp"))

    def test_overwrite_replaces_content(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.write("thanos_chat", "[1]")
        storage.write("thanos_chat", "[1, 2]")
        assert storage.read("thanos_chat") == "[1, 2]"

    def test_remove(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.write("thanos_tutorial_completed", "true")
        storage.remove("thanos_tutorial_completed")
        storage.remove("thanos_tutorial_completed")
        assert storage.read("thanos_tutorial_completed") is None

    @pytest.mark.parametrize("key", ["", "../etc", "a/b", ".hidden"])
    def test_rejects_unsafe_keys(self, tmp_path, key):
        with pytest.raises(StorageError):
            JsonFileStorage(tmp_path).write(key, "x")

    def test_unreadable_file(self, tmp_path):
        (tmp_path / "thanos_goals.json").write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(StorageReadError):
            JsonFileStorage(tmp_path).read("thanos_goals")


def test_memory_storage():
    storage = MemoryStorage({"thanos_stats": "{}"})
    assert storage.read("thanos_stats") == "{}"
    storage.write("thanos_habits", "[]")
    storage.remove("thanos_stats")
    assert storage.values == {"thanos_habits": "[]"}
