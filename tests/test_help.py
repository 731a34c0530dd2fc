from shellbase.help import HelpSystem
from shellbase.registry import CommandRegistry


class _Documented:
    def do_zeta(self, *args: str) -> str:
        """Zeta does things."""
        return "zeta"

    def help_alpha(self, *args: str) -> str:
        if args:
            return f"alpha help on {' '.join(args)}"
        return "alpha help"

    def help_broken(self, *args: str) -> str:
        raise RuntimeError("no docs today")

    def help_silent(self, *args: str) -> None:
        return None


def _help() -> HelpSystem:
    return HelpSystem(CommandRegistry.discover(_Documented()))


def test_listing_is_sorted_one_topic_per_line() -> None:
    assert _help()() == "\n".join(
        [
            "Help is available for the following topics:",
            "  alpha",
            "  broken",
            "  silent",
            "  zeta",
        ]
    )


def test_topic_returns_help_text() -> None:
    assert _help()("alpha") == "alpha help"
    assert _help()("zeta") == "Zeta does things."


def test_extra_arguments_reach_help_producer() -> None:
    assert _help()("alpha", "x", "y") == "alpha help on x y"


def test_unknown_topic_returns_fixed_message() -> None:
    assert _help()("foo") == "No help available for foo."


def test_failing_or_empty_producer_never_raises() -> None:
    assert _help()("broken") == "No help available for broken."
    assert _help()("silent") == "No help available for silent."


def test_listing_without_topics() -> None:
    assert HelpSystem(CommandRegistry())() == "No help topics are available."
