"""Help topic resolution."""

from __future__ import annotations

from loguru import logger

from shellbase.registry import CommandRegistry

LISTING_HEADER = "Help is available for the following topics:"
NO_TOPICS = "No help topics are available."
NO_HELP_TEMPLATE = "No help available for {topic}."


class HelpSystem:
    """Answer ``help`` and ``help <topic>`` from a command registry."""

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry = registry

    def __call__(self, *args: str) -> str:
        if not args:
            return self.listing()
        topic, *rest = args
        return self.topic(topic, *rest)

    def listing(self) -> str:
        topics = sorted(self._registry.helps())
        if not topics:
            return NO_TOPICS
        return "\n".join([LISTING_HEADER, *(f"  {topic}" for topic in topics)])

    def topic(self, name: str, *args: str) -> str:
        producer = self._registry.resolve_help(name)
        if producer is None:
            return NO_HELP_TEMPLATE.format(topic=name)
        try:
            text = producer(*args)
        except Exception:
            logger.opt(exception=True).warning("help.producer_failed topic={}", name)
            return NO_HELP_TEMPLATE.format(topic=name)
        if text is None:
            return NO_HELP_TEMPLATE.format(topic=name)
        return str(text)
