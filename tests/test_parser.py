import pytest

from shellbase.errors import ParseError
from shellbase.parser import ParsedLine, parse_line, split_words


def test_plain_words_split_on_whitespace_runs() -> None:
    parsed = parse_line("foo   bar\tbaz")
    assert parsed == ParsedLine(command="foo", env={}, args=("bar", "baz"))


def test_double_quotes_group_words() -> None:
    parsed = parse_line('foo "bar baz" qux')
    assert parsed.command == "foo"
    assert parsed.args == ("bar baz", "qux")


def test_single_quotes_are_literal() -> None:
    parsed = parse_line(r"echo 'a \"b\" $c'")
    assert parsed.args == (r"a \"b\" $c",)


def test_backslash_escapes_next_character() -> None:
    assert parse_line(r"echo a\ b \#x").args == ("a b", "#x")


def test_backslash_in_double_quotes_only_escapes_special_characters() -> None:
    assert parse_line(r'echo "a\"b" "c\d" "e\\f"').args == ('a"b', r"c\d", "e\\f")


def test_adjacent_quoted_parts_join_one_word() -> None:
    assert parse_line("""echo ab"c d"'e f'g""").args == ("abc de fg",)


def test_empty_quotes_produce_empty_argument() -> None:
    assert parse_line('cmd "" x').args == ("", "x")


def test_env_overlay_keeps_order_and_last_value_wins() -> None:
    parsed = parse_line("A=1 B=2 A=3 cmd x")
    assert parsed.command == "cmd"
    assert parsed.env == {"A": "3", "B": "2"}
    assert list(parsed.env) == ["A", "B"]
    assert parsed.args == ("x",)


def test_assignment_with_empty_value_sets_empty_string() -> None:
    parsed = parse_line("FOO= cmd")
    assert parsed.env == {"FOO": ""}
    assert "FOO" in parsed.env


def test_assignment_value_may_be_quoted() -> None:
    parsed = parse_line('GREETING="hello world" say')
    assert parsed.env == {"GREETING": "hello world"}
    assert parsed.command == "say"


def test_quoted_assignment_is_a_command() -> None:
    parsed = parse_line('"A=1" cmd')
    assert parsed.command == "A=1"
    assert parsed.env == {}
    assert parsed.args == ("cmd",)


def test_assignments_after_command_are_arguments() -> None:
    parsed = parse_line("cmd A=1 B=2")
    assert parsed.env == {}
    assert parsed.args == ("A=1", "B=2")


def test_invalid_identifier_is_not_an_assignment() -> None:
    assert parse_line("1A=2 cmd").command == "1A=2"


def test_only_assignments_give_empty_command() -> None:
    parsed = parse_line("A=1 B=2")
    assert parsed.command == ""
    assert parsed.is_empty
    assert parsed.env == {"A": "1", "B": "2"}


@pytest.mark.parametrize("line", ["", "   ", "\t", "# just a comment", "   # indented comment"])
def test_blank_and_comment_lines_give_empty_command(line: str) -> None:
    parsed = parse_line(line)
    assert parsed.command == ""
    assert parsed.args == ()


def test_trailing_comment_is_stripped() -> None:
    parsed = parse_line("cmd x # trailing")
    assert parsed.command == "cmd"
    assert parsed.args == ("x",)


def test_hash_inside_word_or_quotes_is_literal() -> None:
    assert parse_line("cmd a#b '#c' \"#d\"").args == ("a#b", "#c", "#d")


def test_pipes_and_redirections_are_literal_words() -> None:
    assert parse_line("cmd a | b > c").args == ("a", "|", "b", ">", "c")


def test_backslash_newline_continues_line() -> None:
    assert parse_line("cmd a \\\nb").args == ("a", "b")


@pytest.mark.parametrize("line", ['cmd "unterminated', "cmd 'unterminated", 'cmd "a\\"'])
def test_unterminated_quote_raises_parse_error(line: str) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_line(line)
    assert exc_info.value.line == line
    assert "unterminated" in exc_info.value.reason


def test_trailing_backslash_raises_parse_error() -> None:
    with pytest.raises(ParseError, match="no escaped character"):
        parse_line("cmd a\\")


def test_parsed_line_is_immutable() -> None:
    parsed = parse_line("A=1 cmd")
    with pytest.raises(AttributeError):
        parsed.command = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        parsed.env["A"] = "2"  # type: ignore[index]


def test_split_words_matches_parser_rules() -> None:
    assert split_words("A=1 'b c' d # e") == ["A=1", "b c", "d"]
