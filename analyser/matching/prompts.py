"""Strategies that map a page URL to the query it is expected to answer."""

import re
from abc import ABC, abstractmethod

_TRAIN_TIMES_RE = re.compile(r"train-times/([^/]+)")


class PromptDeriver(ABC):
    """Maps a URL to a canonical query.

    Implementations must be deterministic and side-effect free, and return an
    empty string when no query can be derived.
    """

    @abstractmethod
    def derive(self, url: str) -> str:
        pass

    def __call__(self, url: str) -> str:
        return self.derive(url)


class TrainTimesPromptDeriver(PromptDeriver):
    """Builds a ticket query from ``/train-times/<origin>-to-<destination>/`` URLs."""

    separator = "-to-"
    template = "cheapest {origin} to {destination} train tickets online"

    def derive(self, url: str) -> str:
        match = _TRAIN_TIMES_RE.search(url or "")
        if not match:
            return ""

        route = match.group(1).lower()
        if self.separator not in route:
            return ""

        # Extra segments in routes like "a-to-b-to-c" are ignored
        origin, destination = route.split(self.separator)[:2]
        return self.template.format(origin=origin, destination=destination)
