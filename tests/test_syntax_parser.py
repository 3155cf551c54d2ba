"""Template parser tests.

Covers the accepted placeholder forms, ICU apostrophe quoting, '#' handling
and every rejection path of InvalidPlaceholderError.
"""

from decimal import Decimal

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from msgcatalog.diagnostics import DiagnosticCode, InvalidPlaceholderError
from msgcatalog.enums import FormatType, SelectorKind
from msgcatalog.syntax import (
    ExactKey,
    FormattedPlaceholder,
    NamedKey,
    Placeholder,
    PoundSign,
    SelectPlaceholder,
    Text,
    extract_placeholders,
    find_missing_default,
    max_nesting_depth,
    parse_branch_key,
    parse_template,
)
from tests.strategies import literal_texts, placeholder_names


class TestSimplePlaceholders:
    """Plain and typed placeholders."""

    def test_plain_placeholder(self) -> None:
        template = parse_template("Hello, {name}!")
        assert template.elements == (Text("Hello, "), Placeholder("name"), Text("!"))

    def test_whitespace_inside_braces(self) -> None:
        template = parse_template("{  name  }")
        assert template.elements == (Placeholder("name"),)

    def test_static_template(self) -> None:
        template = parse_template("Back")
        assert template.is_static
        assert template.elements == (Text("Back"),)

    def test_empty_template(self) -> None:
        assert parse_template("").elements == ()

    def test_typed_number(self) -> None:
        template = parse_template("{amount, number}")
        assert template.elements == (FormattedPlaceholder("amount", FormatType.NUMBER),)

    def test_typed_with_style(self) -> None:
        template = parse_template("{when, date, short}")
        assert template.elements == (FormattedPlaceholder("when", FormatType.DATE, "short"),)

    def test_currency_with_code(self) -> None:
        template = parse_template("{price, currency, EUR}")
        assert template.elements == (FormattedPlaceholder("price", FormatType.CURRENCY, "EUR"),)

    @given(name=placeholder_names())
    def test_any_valid_name_parses(self, name: str) -> None:
        """Property: every [A-Za-z_][A-Za-z0-9_]* name is a simple placeholder."""
        event(f"name_len={min(len(name), 5)}")
        assert parse_template(f"{{{name}}}").elements == (Placeholder(name),)


class TestQuoting:
    """ICU apostrophe quoting."""

    def test_double_apostrophe(self) -> None:
        assert parse_template("it''s").elements == (Text("it's"),)

    def test_lone_apostrophe_is_literal(self) -> None:
        assert parse_template("don't").elements == (Text("don't"),)

    def test_quoted_braces(self) -> None:
        assert parse_template("'{literal}'").elements == (Text("{literal}"),)

    def test_quoted_run_with_escaped_apostrophe(self) -> None:
        assert parse_template("'{it''s}'").elements == (Text("{it's}"),)

    def test_unterminated_quote_runs_to_end(self) -> None:
        assert parse_template("a '{b").elements == (Text("a {b"),)

    @given(text=literal_texts())
    def test_brace_free_text_always_parses(self, text: str) -> None:
        """Property: text without braces never raises."""
        template = parse_template(text)
        assert all(isinstance(e, Text) for e in template.elements)


class TestPluralAndSelect:
    """Branching placeholders."""

    def test_plural_with_exact_and_categories(self) -> None:
        template = parse_template("{count, plural, =0 {No messages} one {# message} other {# messages}}")
        (element,) = template.elements
        assert isinstance(element, SelectPlaceholder)
        assert element.kind is SelectorKind.PLURAL
        assert [b.key for b in element.branches] == [
            ExactKey(Decimal(0)),
            NamedKey("one"),
            NamedKey("other"),
        ]
        one = element.branch_map()[NamedKey("one")]
        assert one.elements == (PoundSign(), Text(" message"))

    @pytest.mark.parametrize("key", ["=1", "exact:1", "_1"])
    def test_exact_key_spellings(self, key: str) -> None:
        template = parse_template(f"{{n, plural, {key} {{one}} other {{many}}}}")
        element = template.elements[0]
        assert isinstance(element, SelectPlaceholder)
        assert element.branches[0].key == ExactKey(Decimal(1))

    def test_select(self) -> None:
        template = parse_template("{gender, select, female {She} male {He} other {They}} replied")
        element = template.elements[0]
        assert isinstance(element, SelectPlaceholder)
        assert element.kind is SelectorKind.SELECT
        assert template.elements[1] == Text(" replied")

    def test_pound_is_text_outside_plural(self) -> None:
        assert parse_template("Issue #4").elements == (Text("Issue #4"),)

    def test_pound_is_text_in_select(self) -> None:
        element = parse_template("{g, select, other {#}}").elements[0]
        assert isinstance(element, SelectPlaceholder)
        assert element.branches[0].value.elements == (Text("#"),)

    def test_pound_live_in_select_nested_in_plural(self) -> None:
        outer = parse_template("{n, plural, other {{g, select, other {#}}}}").elements[0]
        assert isinstance(outer, SelectPlaceholder)
        inner = outer.branches[0].value.elements[0]
        assert isinstance(inner, SelectPlaceholder)
        assert inner.branches[0].value.elements == (PoundSign(),)

    def test_quoted_pound_in_plural(self) -> None:
        element = parse_template("{n, plural, other {'#' #}}").elements[0]
        assert isinstance(element, SelectPlaceholder)
        assert element.branches[0].value.elements == (Text("# "), PoundSign())

    def test_in_plural_flag(self) -> None:
        assert parse_template("# left", in_plural=True).elements == (PoundSign(), Text(" left"))

    def test_missing_other_is_accepted_by_parser(self) -> None:
        template = parse_template("{n, plural, one {x}}")
        assert find_missing_default(template) == "n"


class TestRejections:
    """Everything that is not a simple named placeholder raises."""

    @pytest.mark.parametrize(
        ("source", "code"),
        [
            ("Hello {user.name}", DiagnosticCode.PLACEHOLDER_INVALID),
            ("Total: {a + b}", DiagnosticCode.PLACEHOLDER_INVALID),
            ("{1abc}", DiagnosticCode.PLACEHOLDER_INVALID),
            ("{}", DiagnosticCode.PLACEHOLDER_EMPTY),
            ("{ }", DiagnosticCode.PLACEHOLDER_EMPTY),
            ("Hello {name", DiagnosticCode.PLACEHOLDER_UNTERMINATED),
            ("oops }", DiagnosticCode.UNMATCHED_CLOSING_BRACE),
            ("{n, foo}", DiagnosticCode.PLACEHOLDER_UNKNOWN_TYPE),
            ("{n, currency}", DiagnosticCode.PLACEHOLDER_INVALID),
            ("{n, plural,}", DiagnosticCode.BRANCHES_EMPTY),
            ("{n, plural, female {x} other {y}}", DiagnosticCode.BRANCH_KEY_INVALID),
            ("{n, plural, =1 {a} exact:1 {b} other {c}}", DiagnosticCode.BRANCH_DUPLICATE),
            ("{n, plural, =1 {a} =1.0 {b} other {c}}", DiagnosticCode.BRANCH_DUPLICATE),
            ("{n, plural, other {x}", DiagnosticCode.PLACEHOLDER_UNTERMINATED),
        ],
    )
    def test_rejected(self, source: str, code: DiagnosticCode) -> None:
        with pytest.raises(InvalidPlaceholderError) as exc_info:
            parse_template(source)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is code

    def test_error_carries_body_and_position(self) -> None:
        with pytest.raises(InvalidPlaceholderError) as exc_info:
            parse_template("Hello {user.name}")
        assert exc_info.value.placeholder == "user.name"
        assert exc_info.value.position == 6

    def test_nesting_limit(self) -> None:
        source = "{a, plural, other {{b, plural, other {x}}}}"
        assert max_nesting_depth(parse_template(source)) == 2
        with pytest.raises(InvalidPlaceholderError) as exc_info:
            parse_template(source, max_depth=1)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.PLACEHOLDER_NESTING_DEPTH_EXCEEDED

    @given(name=placeholder_names(), junk=st.sampled_from([".x", "[0]", " + 1", "()", "-x"]))
    def test_expressions_never_parse(self, name: str, junk: str) -> None:
        """Property: a name followed by expression syntax is always rejected."""
        event(f"junk={junk.strip()}")
        with pytest.raises(InvalidPlaceholderError):
            parse_template(f"{{{name}{junk}}}")


class TestBranchKeys:
    """parse_branch_key()."""

    def test_plural_keys(self) -> None:
        assert parse_branch_key("=1.5", SelectorKind.PLURAL) == ExactKey(Decimal("1.5"))
        assert parse_branch_key("exact:-1", SelectorKind.PLURAL) == ExactKey(Decimal(-1))
        assert parse_branch_key("few", SelectorKind.PLURAL) == NamedKey("few")

    def test_plural_rejects(self) -> None:
        assert parse_branch_key("=abc", SelectorKind.PLURAL) is None
        assert parse_branch_key("=", SelectorKind.PLURAL) is None
        assert parse_branch_key("female", SelectorKind.PLURAL) is None

    def test_select_keys(self) -> None:
        assert parse_branch_key("x-1", SelectorKind.SELECT) == NamedKey("x-1")
        assert parse_branch_key("one", SelectorKind.SELECT) == NamedKey("one")
        assert parse_branch_key("a.b", SelectorKind.SELECT) is None

    def test_exact_key_canonical_text(self) -> None:
        assert str(ExactKey(Decimal("1.50"))) == "exact:1.5"
        assert str(ExactKey(Decimal("1E+1"))) == "exact:10"
        assert str(ExactKey(Decimal("0.0"))) == "exact:0"


class TestQueries:
    """Visitor queries over parsed templates."""

    def test_extract_placeholders_order_and_uniqueness(self) -> None:
        template = parse_template("{a} {n, plural, other {{b} {amount, number}}} {a}")
        assert extract_placeholders(template) == ("a", "n", "b", "amount")

    def test_find_missing_default_nested(self) -> None:
        template = parse_template("{n, plural, other {{g, select, male {he}}}}")
        assert find_missing_default(template) == "g"

    def test_flat_template_depth(self) -> None:
        assert max_nesting_depth(parse_template("Hi {name}")) == 0


@pytest.mark.fuzz
class TestParserRobustness:
    """Arbitrary input either parses or raises InvalidPlaceholderError."""

    @given(source=st.text(alphabet="{}#',= abn0123plural select other one", max_size=60))
    def test_structural_noise(self, source: str) -> None:
        """Property: the parser never fails with an unexpected exception."""
        try:
            template = parse_template(source)
        except InvalidPlaceholderError as e:
            assert e.diagnostic is not None
            event(f"rejected={e.diagnostic.code.name}")
        else:
            event("outcome=parsed")
            assert max_nesting_depth(template) >= 0
