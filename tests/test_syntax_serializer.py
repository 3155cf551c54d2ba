"""Template serializer tests.

serialize_template() produces a canonical form that reparses to an equal AST.
"""

import pytest
from hypothesis import assume, event, given

from msgcatalog.diagnostics import InvalidPlaceholderError
from msgcatalog.syntax import Template, Text, parse_template, serialize_template
from tests.strategies import template_sources


class TestCanonicalForm:
    """Canonical spellings."""

    def test_exact_keys_written_with_equals(self) -> None:
        source = "{n, plural, _0 {none} exact:1 {one} other {# items}}"
        assert serialize_template(parse_template(source)) == (
            "{n, plural, =0 {none} =1 {one} other {# items}}"
        )

    def test_whitespace_normalized(self) -> None:
        source = "{ amount ,number }  {  when, date ,  short }"
        assert serialize_template(parse_template(source)) == "{amount, number}  {when, date, short}"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("it's", "it''s"),
            ("{x}", "'{'x'}'"),
            ("# left", "# left"),
        ],
    )
    def test_text_escaping(self, value: str, expected: str) -> None:
        assert serialize_template(Template((Text(value),))) == expected

    def test_pound_text_quoted_in_plural_body(self) -> None:
        template = Template((Text("#1"),))
        assert serialize_template(template, in_plural=True) == "'#'1"

    def test_select_with_nested_pound(self) -> None:
        source = "{n, plural, other {{g, select, female {# her} other {# them}}}}"
        assert serialize_template(parse_template(source)) == source


class TestRoundTrip:
    """Reparsing the canonical form."""

    @pytest.mark.parametrize(
        "source",
        [
            "Hello, {name}!",
            "it''s '{'quoted'}'",
            "{count, plural, =0 {No messages} one {# message} other {# messages}}",
            "{gender, select, female {She} male {He} other {They}} replied",
            "{price, currency, EUR} on {when, date, short}",
        ],
    )
    def test_known_templates(self, source: str) -> None:
        template = parse_template(source)
        assert parse_template(serialize_template(template)) == template

    @given(source=template_sources())
    def test_serialize_reparses_to_same_ast(self, source: str) -> None:
        """Property: parse(serialize(parse(s))) == parse(s) for every valid s."""
        try:
            template = parse_template(source)
        except InvalidPlaceholderError:
            event("outcome=invalid_source")
            assume(False)
            return
        event(f"outcome={'static' if template.is_static else 'dynamic'}")
        assert parse_template(serialize_template(template)) == template
