"""Configuration dataclass for the journal search engine.

A pure data container with sensible defaults. Override it from YAML config,
env vars (through ``SearchConfig.from_config``), or constructor args.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from zensearch.core.exceptions import ConfigurationError

from .models import EntryKind

if TYPE_CHECKING:
    from zensearch.core.config import Config


@dataclass
class SearchConfig:
    """Settings for ranking, prefix fallback and snippets.

    Attributes:
        default_limit: Result cap when a query passes a non-positive limit.
        prefix_scan_cap: Maximum indexed terms visited per prefix fallback.
        prefix_penalty: Weight of prefix matches relative to exact matches.
        recency_boost_max: Score bonus for entries created today (0.30 = +30%).
        recency_window_days: Days over which the recency bonus decays to zero.
        kind_boosts: Multiplier per entry kind value.
        snippet_max_length: Maximum snippet length in characters.
        snippet_context: Characters kept on each side of the match.
        snippet_min_cut: Shortest snippet body a word-boundary cut may leave.
        index_umlaut_aliases: Also index plain-vowel spellings of umlaut words.
    """

    default_limit: int = 50
    prefix_scan_cap: int = 80
    prefix_penalty: float = 0.66
    recency_boost_max: float = 0.30
    recency_window_days: int = 30
    kind_boosts: dict[str, float] = field(default_factory=lambda: {EntryKind.REFLECTION.value: 1.05})
    snippet_max_length: int = 160
    snippet_context: int = 50
    snippet_min_cut: int = 40
    index_umlaut_aliases: bool = True

    def kind_boost(self, kind: EntryKind) -> float:
        return self.kind_boosts.get(kind.value, 1.0)

    @classmethod
    def from_config(cls, config: Config) -> SearchConfig:
        """Build from the ``search`` section of a Config.

        Raises:
            ConfigurationError: If a value is invalid or a boost names an unknown kind.
        """
        settings = config.validated().search
        known = {kind.value for kind in EntryKind}
        unknown = sorted(set(settings.kind_boosts) - known)
        if unknown:
            raise ConfigurationError(f"kind_boosts names unknown kinds: {unknown}")
        return cls(**settings.model_dump())
