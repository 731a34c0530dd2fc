from pathlib import Path

from shellbase.rcfile import load_rcfiles, parse_rcfile


def test_parse_assignments_flags_and_negations() -> None:
    config = parse_rcfile(
        "\n".join(
            [
                "# leading comment",
                "name = value",
                "spaced   =   padded value  ",
                "verbose",
                "nocolor",
                "",
            ]
        )
    )
    assert config == {"name": "value", "spaced": "padded value", "verbose": True, "color": False}


def test_trailing_comment_is_removed() -> None:
    assert parse_rcfile("pager = less   # the pager") == {"pager": "less"}


def test_backslash_continues_value_on_next_line() -> None:
    config = parse_rcfile("banner = hello \\\n    world\nafter = 1")
    assert config == {"banner": "hello world", "after": "1"}


def test_later_definition_overrides_earlier() -> None:
    assert parse_rcfile("a = 1\na = 2\nflag\nnoflag") == {"a": "2", "flag": False}


def test_empty_value_is_kept() -> None:
    assert parse_rcfile("empty =") == {"empty": ""}


def test_malformed_lines_are_skipped() -> None:
    assert parse_rcfile("this is not valid\nok = yes") == {"ok": "yes"}


def test_bare_no_is_a_true_flag() -> None:
    assert parse_rcfile("no") == {"no": True}


def test_load_rcfiles_merges_in_order_and_skips_missing(tmp_path: Path) -> None:
    first = tmp_path / "first.rc"
    second = tmp_path / "second.rc"
    first.write_text("a = 1\nb = 1\n", encoding="utf-8")
    second.write_text("b = 2\nverbose\n", encoding="utf-8")

    config = load_rcfiles([first, tmp_path / "missing.rc", second])
    assert config == {"a": "1", "b": "2", "verbose": True}
