from __future__ import annotations

from typing import List, Optional

from bgee_web.config import AppConfig, SourceConfig, load_config
from bgee_web.models import Source


def _to_source(cfg: SourceConfig) -> Source:
    return Source(
        id=cfg.id,
        name=cfg.name,
        description=cfg.description,
        base_url=cfg.base_url,
        xref_url=cfg.xref_url,
        experiment_url=cfg.experiment_url,
        evidence_url=cfg.evidence_url,
        release_date=cfg.release_date,
        release_version=cfg.release_version,
        to_display=cfg.to_display,
        category=cfg.category,
        display_order=cfg.display_order,
    )


class SourceService:
    """Data sources used by Bgee, as declared in the configuration."""

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or load_config()
        self._sources = [_to_source(s) for s in self.config.sources]

    def load_sources(self, displayed_only: bool = False) -> List[Source]:
        sources = [s for s in self._sources if s.to_display or not displayed_only]
        return sorted(sources, key=lambda s: (s.display_order, s.name.lower()))

    def get_source_by_name(self, name: str) -> Optional[Source]:
        lowered = name.lower()
        for source in self._sources:
            if source.name.lower() == lowered:
                return source
        return None


__all__ = ["SourceService"]
