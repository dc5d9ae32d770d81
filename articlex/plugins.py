"""articlex.plugins: extension point registry for container scorers and
boilerplate filters.

Usage::

    from articlex import register_scorer

    class BoostStoryBody:
        name = "boost_story_body"
        def score(self, node, base_score: float) -> float:
            return base_score + (50 if "story-body" in node.class_string else 0)

    register_scorer(BoostStoryBody())

Both plugin types follow ``runtime_checkable`` ``Protocol`` contracts so you
can use ``isinstance()`` checks in tests without inheriting from a base
class.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# Protocol definitions
# ---------------------------------------------------------------------------

@runtime_checkable
class ScorerPlugin(Protocol):
    """Adjusts the score the built-in heuristic gives a candidate container."""

    name: str

    def score(self, node: Any, base_score: float) -> float:
        """Return a new score (may be higher or lower than *base_score*)."""
        ...


@runtime_checkable
class FilterPlugin(Protocol):
    """Extra boilerplate check consulted after the built-in exclusion stages."""

    name: str

    def exclude(self, node: Any) -> bool:
        """Return True if *node* should be dropped from the article."""
        ...


# ---------------------------------------------------------------------------
# Module-level registry
# ---------------------------------------------------------------------------

_registry: dict[str, list[Any]] = {
    "scorers": [],
    "filters": [],
}


# ---------------------------------------------------------------------------
# Registration helpers
# ---------------------------------------------------------------------------

def register_scorer(plugin: ScorerPlugin) -> None:
    """Register a custom :class:`ScorerPlugin`."""
    _registry["scorers"].append(plugin)


def register_filter(plugin: FilterPlugin) -> None:
    """Register a custom :class:`FilterPlugin`."""
    _registry["filters"].append(plugin)


# ---------------------------------------------------------------------------
# Accessor helpers
# ---------------------------------------------------------------------------

def get_scorers() -> list[ScorerPlugin]:
    """Return all registered scorer plugins."""
    return list(_registry["scorers"])


def get_filters() -> list[FilterPlugin]:
    """Return all registered filter plugins."""
    return list(_registry["filters"])


def clear_plugins() -> None:
    """Remove all registered plugins. Primarily for use in tests."""
    for value in _registry.values():
        value.clear()
