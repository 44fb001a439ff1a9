from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bgee_web.config import AppConfig, load_config


@dataclass(frozen=True)
class Endpoint:
    """A Bgee SPARQL endpoint; `graph` is set when queries must name one."""

    id: str
    label: str
    sparql_url: str
    graph: Optional[str] = None


def get_current_endpoint(cfg: Optional[AppConfig] = None) -> Endpoint:
    """Endpoint of the latest release. Its queries use the default graph."""
    sparql = (cfg or load_config()).sparql
    return Endpoint(id="current", label="Bgee SPARQL endpoint", sparql_url=sparql.current_url)


def get_stable_endpoint(cfg: Optional[AppConfig] = None) -> Endpoint:
    """Endpoint frozen at this release. Its queries target the stable graph."""
    cfg = cfg or load_config()
    return Endpoint(
        id="stable",
        label=f"Bgee SPARQL endpoint ({cfg.site.release})",
        sparql_url=cfg.sparql.stable_url,
        graph=cfg.sparql.stable_graph,
    )


__all__ = ["Endpoint", "get_current_endpoint", "get_stable_endpoint"]
