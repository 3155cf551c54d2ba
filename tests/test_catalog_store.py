"""CatalogStore tests: snapshot publication and concurrent readers."""

import threading

import pytest

from msgcatalog import Catalog, CatalogEntry
from msgcatalog.catalog import CatalogSnapshot, CatalogStore


def _catalog(locale: str, text: str, *ids: str) -> Catalog:
    return Catalog(locale, [CatalogEntry.create(i, text) for i in ids or ("msg.back",)])


class TestPublication:
    """Writes produce new snapshots with increasing versions."""

    def test_initial_snapshot_empty(self) -> None:
        store = CatalogStore()
        assert store.version == 0
        assert store.locales == ()
        assert store.lookup("fr", "msg.back") is None

    def test_initial_catalogs_published(self) -> None:
        store = CatalogStore([_catalog("fr", "Retour")])
        assert store.version == 1
        assert store.has_locale("fr")

    def test_publish_replaces_everything(self) -> None:
        store = CatalogStore([_catalog("fr", "Retour")])
        snapshot = store.publish([_catalog("de", "Zurück")])
        assert snapshot.version == 2
        assert store.locales == ("de",)

    def test_publish_mapping(self) -> None:
        store = CatalogStore()
        store.publish({"fr": _catalog("fr", "Retour")})
        assert store.get_catalog("fr") is not None

    def test_publish_duplicate_locale(self) -> None:
        store = CatalogStore()
        with pytest.raises(ValueError, match="Duplicate catalog"):
            store.publish([_catalog("fr", "a"), _catalog("fr-FR", "b"), _catalog("fr", "c")])
        assert store.version == 0

    def test_replace_catalog_keeps_others(self) -> None:
        store = CatalogStore([_catalog("fr", "Retour"), _catalog("de", "Zurück")])
        store.replace_catalog(_catalog("fr", "Précédent"))
        entry = store.lookup("fr", "msg.back")
        assert entry is not None
        assert entry.template.elements[0].value == "Précédent"  # type: ignore[union-attr]
        assert store.has_locale("de")

    def test_replace_catalogs_single_version_bump(self) -> None:
        store = CatalogStore()
        snapshot = store.replace_catalogs([_catalog("fr", "a"), _catalog("de", "b")])
        assert snapshot.version == 1
        assert set(snapshot.locales) == {"fr", "de"}

    def test_remove_locale(self) -> None:
        store = CatalogStore([_catalog("fr", "Retour"), _catalog("de", "Zurück")])
        store.remove_locale("FR")
        assert store.locales == ("de",)
        assert store.version == 2

    def test_lookup_canonicalizes(self) -> None:
        store = CatalogStore([_catalog("pt_BR", "Voltar")])
        assert store.lookup("pt-br", "msg.back") is not None

    def test_old_snapshot_unchanged(self) -> None:
        store = CatalogStore([_catalog("fr", "Retour")])
        old = store.snapshot
        store.replace_catalog(_catalog("de", "Zurück"))
        assert old.locales == ("fr",)
        assert old.version == 1
        assert store.snapshot.entry_count == 2


class TestSnapshot:
    """CatalogSnapshot accessors."""

    def test_empty(self) -> None:
        snapshot = CatalogSnapshot()
        assert snapshot.version == 0
        assert snapshot.entry_count == 0
        assert snapshot.get("fr") is None
        assert snapshot.lookup("fr", "x") is None


class TestConcurrency:
    """Readers never observe a partially published snapshot."""

    def test_readers_see_consistent_snapshots(self) -> None:
        ids = [f"m{i}" for i in range(20)]
        store = CatalogStore([_catalog("fr", "v0", *ids)])
        stop = threading.Event()
        inconsistencies: list[str] = []

        def reader() -> None:
            while not stop.is_set():
                snapshot = store.snapshot
                catalog = snapshot.get("fr")
                if catalog is None:
                    inconsistencies.append("missing catalog")
                    continue
                texts = {
                    entry.template.elements[0].value  # type: ignore[union-attr]
                    for entry in catalog
                }
                if len(texts) != 1:
                    inconsistencies.append(f"mixed texts in v{snapshot.version}: {texts}")

        def writer() -> None:
            for version in range(1, 200):
                store.replace_catalog(_catalog("fr", f"v{version}", *ids))

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for thread in readers:
            thread.start()
        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        writer_thread.join()
        stop.set()
        for thread in readers:
            thread.join()

        assert inconsistencies == []
        assert store.version == 200

    def test_concurrent_writers_serialize_versions(self) -> None:
        store = CatalogStore()
        versions: list[int] = []
        lock = threading.Lock()

        def writer(locale: str) -> None:
            for _ in range(50):
                snapshot = store.replace_catalog(_catalog(locale, locale))
                with lock:
                    versions.append(snapshot.version)

        threads = [threading.Thread(target=writer, args=(loc,)) for loc in ("fr", "de", "es")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(versions) == list(range(1, 151))
        assert set(store.locales) == {"fr", "de", "es"}
