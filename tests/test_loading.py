"""Catalog loader tests: JSON on disk, in-memory, results and summaries."""

import json
from pathlib import Path

import pytest

from msgcatalog import (
    Catalog,
    CatalogEntry,
    CatalogLoadError,
    CatalogLoadResult,
    DictCatalogLoader,
    InvalidPlaceholderError,
    LoadSummary,
    PathCatalogLoader,
)
from msgcatalog.catalog import CatalogLoader
from msgcatalog.diagnostics import DiagnosticCode
from msgcatalog.enums import LoadStatus


def _write(directory: Path, locale: str, data: object) -> Path:
    path = directory / f"{locale}.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def loader(tmp_path: Path) -> PathCatalogLoader:
    return PathCatalogLoader(str(tmp_path / "{locale}.json"))


class TestPathCatalogLoader:
    """JSON files addressed by a {locale} path template."""

    def test_load_flat_mapping(self, tmp_path: Path, loader: PathCatalogLoader) -> None:
        _write(tmp_path, "fr", {"msg.back": {"template": "Retour", "translated": True}})
        catalog = loader.load("fr")
        assert catalog.locale == "fr"
        assert catalog.get("msg.back") == CatalogEntry.create("msg.back", "Retour")

    def test_load_envelope(self, tmp_path: Path, loader: PathCatalogLoader) -> None:
        _write(tmp_path, "pt_BR", {"locale": "pt-BR", "messages": {"msg.back": "Voltar"}})
        assert len(loader.load("pt_BR")) == 1

    def test_envelope_locale_mismatch(self, tmp_path: Path, loader: PathCatalogLoader) -> None:
        _write(tmp_path, "fr", {"locale": "de", "messages": {}})
        with pytest.raises(CatalogLoadError) as exc_info:
            loader.load("fr")
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.LOAD_LOCALE_MISMATCH

    def test_missing_file(self, loader: PathCatalogLoader) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load("de")

    def test_invalid_json(self, tmp_path: Path, loader: PathCatalogLoader) -> None:
        (tmp_path / "fr.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogLoadError) as exc_info:
            loader.load("fr")
        assert exc_info.value.locale == "fr"
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.LOAD_MALFORMED

    def test_top_level_must_be_object(self, tmp_path: Path, loader: PathCatalogLoader) -> None:
        _write(tmp_path, "fr", ["msg.back"])
        with pytest.raises(CatalogLoadError):
            loader.load("fr")

    def test_malformed_entry_shape(self, tmp_path: Path, loader: PathCatalogLoader) -> None:
        _write(tmp_path, "fr", {"msg.back": 42})
        with pytest.raises(CatalogLoadError):
            loader.load("fr")

    def test_template_syntax_error_propagates(
        self, tmp_path: Path, loader: PathCatalogLoader
    ) -> None:
        _write(tmp_path, "fr", {"msg.back": "Retour {user.name}"})
        with pytest.raises(InvalidPlaceholderError):
            loader.load("fr")

    def test_file_too_large(
        self, tmp_path: Path, loader: PathCatalogLoader, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write(tmp_path, "fr", {"msg.back": "Retour"})
        monkeypatch.setattr("msgcatalog.catalog.loading.MAX_SOURCE_SIZE", 5)
        with pytest.raises(CatalogLoadError) as exc_info:
            loader.load("fr")
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.LOAD_FAILED

    @pytest.mark.parametrize("locale", ["", "../etc", "fr/../../etc", "a\\b", "fr fr"])
    def test_unsafe_locales_rejected(self, loader: PathCatalogLoader, locale: str) -> None:
        with pytest.raises(ValueError):
            loader.load(locale)

    def test_base_path_requires_placeholder(self) -> None:
        with pytest.raises(ValueError, match="placeholder"):
            PathCatalogLoader("locales/fr.json")

    def test_describe_path(self) -> None:
        assert PathCatalogLoader("locales/{locale}.json").describe_path("fr") == "locales/fr.json"

    def test_satisfies_protocol(self, loader: PathCatalogLoader) -> None:
        def describe(source: CatalogLoader) -> str:
            return source.describe_path("fr")

        assert describe(loader).endswith("fr.json")


class TestDictCatalogLoader:
    """In-memory loader."""

    def test_mapping_values(self) -> None:
        loader = DictCatalogLoader({"fr": {"msg.back": "Retour"}})
        assert loader.load("FR").get("msg.back") is not None

    def test_catalog_values_passed_through(self) -> None:
        catalog = Catalog("de", [CatalogEntry.create("msg.back", "Zurück")])
        assert DictCatalogLoader({"de": catalog}).load("de") is catalog

    def test_missing_locale(self) -> None:
        with pytest.raises(FileNotFoundError):
            DictCatalogLoader({}).load("fr")

    def test_malformed(self) -> None:
        with pytest.raises(CatalogLoadError):
            DictCatalogLoader({"fr": {"msg.back": {"template": 3}}}).load("fr")

    def test_describe_path(self) -> None:
        assert DictCatalogLoader({}).describe_path("fr") == "memory://fr"


class TestLoadResults:
    """CatalogLoadResult and LoadSummary."""

    def test_result_status_flags(self) -> None:
        ok = CatalogLoadResult(locale="fr", status=LoadStatus.SUCCESS, entry_count=3)
        missing = CatalogLoadResult(locale="de", status=LoadStatus.NOT_FOUND)
        assert ok.is_success
        assert not ok.is_error
        assert missing.is_not_found

    def test_summary_counts(self) -> None:
        error = CatalogLoadResult(
            locale="es", status=LoadStatus.ERROR, error=CatalogLoadError("bad", locale="es")
        )
        summary = LoadSummary(
            results=(
                CatalogLoadResult(locale="fr", status=LoadStatus.SUCCESS, entry_count=3),
                CatalogLoadResult(locale="de", status=LoadStatus.NOT_FOUND),
                error,
            )
        )
        assert summary.total_attempted == 3
        assert (summary.successful, summary.not_found, summary.errors) == (1, 1, 1)
        assert summary.entry_count == 3
        assert summary.get_errors() == (error,)
        assert [r.locale for r in summary.get_not_found()] == ["de"]
        assert [r.locale for r in summary.get_successful()] == ["fr"]
        assert summary.get_by_locale("es") == (error,)
        assert summary.has_errors
        assert not summary.all_successful
        assert repr(summary) == "LoadSummary(total=3, ok=1, not_found=1, errors=1)"

    def test_empty_summary_all_successful(self) -> None:
        assert LoadSummary(results=()).all_successful
