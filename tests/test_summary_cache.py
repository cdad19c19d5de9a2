from __future__ import annotations

import json
import threading
from pathlib import Path

from cityweather.models.weather import WeatherSummary
from cityweather.repositories.json_file import JsonFileStore
from cityweather.services.summary_cache import STORAGE_KEY, SummaryCache
from tests.fakes import FakeKeyValueStore

PARIS = WeatherSummary(temp_max_c=14.75, temp_min_c=10.25, condition_icon="04d")
OSLO = WeatherSummary(temp_max_c=2.0, temp_min_c=-3.0, condition_icon="13d")


def test_set_persists_and_survives_reload(tmp_path: Path) -> None:
    path = tmp_path / "state" / "summaries.json"
    cache = SummaryCache(JsonFileStore(path))
    cache.load_all()

    cache.set("Paris", PARIS)

    reloaded = SummaryCache(JsonFileStore(path))
    assert reloaded.get("Paris") is None
    assert reloaded.load_all() == {"Paris": PARIS}
    assert reloaded.get("Paris") == PARIS


def test_persisted_blob_uses_single_key_and_wire_names() -> None:
    store = FakeKeyValueStore()
    cache = SummaryCache(store)

    cache.set("Paris", PARIS)

    assert list(store.items) == [STORAGE_KEY]
    assert json.loads(store.items[STORAGE_KEY]) == {
        "Paris": {"temp_max": 14.75, "temp_min": 10.25, "weather": "04d"}
    }


def test_every_set_writes_through() -> None:
    store = FakeKeyValueStore()
    cache = SummaryCache(store)

    cache.set("Paris", PARIS)
    cache.set("Oslo", WeatherSummary(temp_max_c=2.0, temp_min_c=-3.0, condition_icon="13d"))
    cache.set("Paris", WeatherSummary(temp_max_c=20.0, temp_min_c=11.0, condition_icon="01d"))

    assert store.writes == 3
    assert cache.get("Paris") == WeatherSummary(
        temp_max_c=20.0, temp_min_c=11.0, condition_icon="01d"
    )
    assert set(json.loads(store.items[STORAGE_KEY])) == {"Paris", "Oslo"}


def test_corrupt_blob_is_discarded() -> None:
    store = FakeKeyValueStore({STORAGE_KEY: "{not json"})
    cache = SummaryCache(store)

    assert cache.load_all() == {}
    cache.set("Paris", PARIS)
    assert json.loads(store.items[STORAGE_KEY]) == {
        "Paris": {"temp_max": 14.75, "temp_min": 10.25, "weather": "04d"}
    }


def test_malformed_entry_discards_blob() -> None:
    blob = json.dumps({"Paris": {"temp_max": 1.0}, "Oslo": [1, 2]})
    cache = SummaryCache(FakeKeyValueStore({STORAGE_KEY: blob}))

    assert cache.load_all() == {}


def test_load_all_reads_values_written_by_other_clients() -> None:
    blob = json.dumps({"Lyon": {"temp_max": 18, "temp_min": 9.5, "weather": "02d"}})
    cache = SummaryCache(FakeKeyValueStore({STORAGE_KEY: blob}))

    assert cache.load_all() == {
        "Lyon": WeatherSummary(temp_max_c=18.0, temp_min_c=9.5, condition_icon="02d")
    }


def test_json_file_store_recovers_from_garbage_file(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("garbage", encoding="utf-8")
    store = JsonFileStore(path)

    assert store.get_item("anything") is None
    store.set_item("k", "v")
    assert JsonFileStore(path).get_item("k") == "v"
    assert list(tmp_path.iterdir()) == [path]


class _InterleavingStore(FakeKeyValueStore):
    """Starts a second writer from inside the first write."""

    def __init__(self) -> None:
        super().__init__()
        self.cache: SummaryCache | None = None
        self.other: threading.Thread | None = None

    def set_item(self, key: str, value: str) -> None:
        if self.other is None and self.cache is not None:
            cache = self.cache
            self.other = threading.Thread(target=cache.set, args=("Oslo", OSLO))
            self.other.start()
            self.other.join(timeout=0.2)
        super().set_item(key, value)


def test_concurrent_sets_keep_newest_mapping_on_disk() -> None:
    store = _InterleavingStore()
    cache = SummaryCache(store)
    store.cache = cache

    cache.set("Paris", PARIS)
    assert store.other is not None
    store.other.join()

    assert json.loads(store.items[STORAGE_KEY]).keys() == {"Paris", "Oslo"}
    assert SummaryCache(store).load_all() == {"Paris": PARIS, "Oslo": OSLO}


def test_json_file_store_keeps_every_concurrent_key(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "store.json")
    threads = [
        threading.Thread(target=store.set_item, args=(f"k{i}", str(i))) for i in range(20)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    reread = JsonFileStore(tmp_path / "store.json")
    assert {f"k{i}": reread.get_item(f"k{i}") for i in range(20)} == {
        f"k{i}": str(i) for i in range(20)
    }
