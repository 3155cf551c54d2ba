"""CatalogEntry and Catalog tests: construction, validation, persistence."""

from decimal import Decimal

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from msgcatalog import (
    Catalog,
    CatalogEntry,
    InvalidPlaceholderError,
    MissingDefaultBranchError,
)
from msgcatalog.enums import SelectorKind
from msgcatalog.syntax import ExactKey, NamedKey, PoundSign, Text
from tests.strategies import literal_texts, raw_locale_codes


def _inbox() -> CatalogEntry:
    return CatalogEntry.create(
        "inbox",
        "",
        plural_branches={"_0": "No messages", "one": "# message", "other": "# messages"},
    )


class TestCatalogEntryCreate:
    """CatalogEntry.create()."""

    def test_plain(self) -> None:
        entry = CatalogEntry.create("msg.back", "Retour")
        assert entry.template.elements == (Text("Retour"),)
        assert entry.translated
        assert entry.plural_branches == ()

    @pytest.mark.parametrize("key", ["_0", "=0", "exact:0"])
    def test_exact_key_spellings_canonicalize(self, key: str) -> None:
        entry = CatalogEntry.create("n", "", plural_branches={key: "none", "other": "some"})
        assert entry.plural_branches[0].key == ExactKey(Decimal(0))
        assert list(entry.branch_map()) == ["exact:0", "other"]

    def test_pound_live_in_plural_branches(self) -> None:
        branch = _inbox().branch_map()["one"]
        assert branch.elements == (PoundSign(), Text(" message"))

    def test_pound_literal_in_select_branches(self) -> None:
        entry = CatalogEntry.create(
            "tag",
            "",
            plural_branches={"other": "#hashtag"},
            selector="kind",
            selector_kind=SelectorKind.SELECT,
        )
        assert entry.branch_map()["other"].elements == (Text("#hashtag"),)

    def test_missing_other(self) -> None:
        with pytest.raises(MissingDefaultBranchError) as exc_info:
            CatalogEntry.create("n", "", plural_branches={"one": "x"})
        assert exc_info.value.selector == "count"

    def test_invalid_key(self) -> None:
        with pytest.raises(InvalidPlaceholderError):
            CatalogEntry.create("n", "", plural_branches={"lots": "x", "other": "y"})

    def test_duplicate_key_after_canonicalization(self) -> None:
        with pytest.raises(InvalidPlaceholderError):
            CatalogEntry.create("n", "", plural_branches={"=1": "a", "_1": "b", "other": "c"})

    def test_invalid_selector(self) -> None:
        with pytest.raises(InvalidPlaceholderError):
            CatalogEntry.create("n", "", plural_branches={"other": "x"}, selector="a.b")

    def test_nested_table_without_other(self) -> None:
        with pytest.raises(MissingDefaultBranchError):
            CatalogEntry.create("n", "{g, select, male {He}}")

    def test_template_syntax_error(self) -> None:
        with pytest.raises(InvalidPlaceholderError):
            CatalogEntry.create("n", "Hello {user.name}")

    def test_placeholders_include_selector(self) -> None:
        entry = CatalogEntry.create(
            "files", "{owner}", plural_branches={"other": "# files in {folder}"}
        )
        assert entry.placeholders() == ("owner", "count", "folder")


class TestCatalogEntryPersistence:
    """to_dict() / from_dict()."""

    def test_to_dict_plain(self) -> None:
        assert CatalogEntry.create("a", "it's {x}").to_dict() == {
            "template": "it''s {x}",
            "translated": True,
        }

    def test_to_dict_branches(self) -> None:
        assert _inbox().to_dict() == {
            "template": "",
            "pluralBranches": {
                "exact:0": "No messages",
                "one": "# message",
                "other": "# messages",
            },
            "selector": "count",
            "selectorKind": "plural",
            "translated": True,
        }

    def test_from_dict_template_defaults_to_other(self) -> None:
        entry = CatalogEntry.from_dict("n", {"pluralBranches": {"one": "an item", "other": "items"}})
        assert entry.template == entry.branch_map()["other"]

    def test_from_dict_round_trip(self) -> None:
        entry = _inbox()
        assert CatalogEntry.from_dict("inbox", entry.to_dict()) == entry

    @pytest.mark.parametrize(
        "data",
        [
            {"template": 3},
            {"template": "x", "translated": "yes"},
            {"template": "x", "selector": 1},
            {"template": "x", "selectorKind": "ordinal"},
            {"pluralBranches": ["other"]},
            {"pluralBranches": {"other": 5}},
        ],
    )
    def test_from_dict_shape_errors(self, data: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            CatalogEntry.from_dict("n", data)

    @given(text=literal_texts(), translated=st.booleans())
    def test_plain_entry_persistence(self, text: str, translated: bool) -> None:
        """Property: persisted plain entries rebuild to an equal entry."""
        event(f"translated={translated}")
        entry = CatalogEntry.create("m", text, translated=translated)
        assert CatalogEntry.from_dict("m", entry.to_dict()) == entry


class TestCatalog:
    """Catalog container."""

    def test_lookup(self) -> None:
        catalog = Catalog("fr", [CatalogEntry.create("msg.back", "Retour")])
        assert catalog.get("msg.back") is not None
        assert catalog.get("msg.next") is None
        assert "msg.back" in catalog
        assert len(catalog) == 1

    def test_locale_canonicalized(self) -> None:
        assert Catalog("pt-br").locale == "pt_BR"

    @given(locale=raw_locale_codes())
    def test_any_spelling_canonicalizes(self, locale: str) -> None:
        """Property: case and separator variants produce one canonical locale."""
        canonical = Catalog(locale).locale
        event(f"changed={canonical != locale}")
        assert Catalog(canonical).locale == canonical

    def test_invalid_locale(self) -> None:
        with pytest.raises(ValueError):
            Catalog("../etc")

    def test_duplicate_ids(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            Catalog("fr", [CatalogEntry.create("a", "x"), CatalogEntry.create("a", "y")])

    def test_mapping_key_mismatch(self) -> None:
        with pytest.raises(ValueError, match="does not match"):
            Catalog("fr", {"a": CatalogEntry.create("b", "x")})

    def test_insertion_order(self) -> None:
        catalog = Catalog("fr", [CatalogEntry.create(i, i) for i in ("c", "a", "b")])
        assert catalog.ids() == ("c", "a", "b")
        assert [e.id for e in catalog] == ["c", "a", "b"]

    def test_translated_count(self) -> None:
        catalog = Catalog(
            "fr",
            [CatalogEntry.create("a", "x"), CatalogEntry.create("b", "y", translated=False)],
        )
        assert catalog.translated_count == 1

    def test_with_entry_and_without(self) -> None:
        catalog = Catalog("fr", [CatalogEntry.create("a", "x"), CatalogEntry.create("b", "y")])
        replaced = catalog.with_entry(CatalogEntry.create("a", "z"))
        assert replaced.ids() == ("a", "b")
        assert replaced.get("a") == CatalogEntry.create("a", "z")
        assert catalog.get("a") == CatalogEntry.create("a", "x")
        assert catalog.without("a").ids() == ("b",)

    def test_entries_read_only(self) -> None:
        catalog = Catalog("fr", [CatalogEntry.create("a", "x")])
        with pytest.raises(TypeError):
            catalog.entries["b"] = CatalogEntry.create("b", "y")  # type: ignore[index]

    def test_persisted_round_trip(self) -> None:
        catalog = Catalog(
            "fr",
            [
                CatalogEntry.create("msg.back", "Retour"),
                CatalogEntry.create("msg.next", "Next", translated=False),
                CatalogEntry.create(
                    "inbox", "", plural_branches={"=0": "Aucun message", "other": "# messages"}
                ),
            ],
        )
        assert Catalog.from_dict("fr", catalog.to_dict()) == catalog

    def test_from_dict_accepts_bare_strings(self) -> None:
        catalog = Catalog.from_dict("fr", {"msg.back": "Retour"})
        entry = catalog.get("msg.back")
        assert entry is not None
        assert entry.translated

    def test_from_dict_rejects_other_values(self) -> None:
        with pytest.raises(ValueError, match="expected a mapping or string"):
            Catalog.from_dict("fr", {"msg.back": 42})
