from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

import yaml


CONFIG_ENV_VAR = "BGEE_WEB_CONFIG_PATH"


@dataclass
class SiteConfig:
    bgee_root_directory: str = "/"
    images_root_directory: str = "/img/"
    logo_images_root_directory: str = "/img/logo/"
    css_files_root_directory: str = "/css/"
    javascript_files_root_directory: str = "/js/"
    release: str = "Bgee 15.0"
    archive: bool = False


@dataclass
class SparqlConfig:
    current_url: str = "https://www.bgee.org/sparql/"
    stable_url: str = "https://www.bgee.org/sparql/"
    stable_graph: str = "https://www.bgee.org/bgee_15_0"
    timeout_s: float = 30.0


@dataclass
class UIConfig:
    max_expression_calls: int = 100


@dataclass
class JobConfig:
    max_jobs_per_user: int = 3


@dataclass
class SourceConfig:
    id: int
    name: str
    description: str = ""
    base_url: str = ""
    xref_url: str = ""
    experiment_url: str = ""
    evidence_url: str = ""
    release_date: Optional[date] = None
    release_version: Optional[str] = None
    to_display: bool = True
    category: str = "Other"
    display_order: int = 0


@dataclass
class AppConfig:
    raw: Dict[str, Any]
    site: SiteConfig
    sparql: SparqlConfig
    ui: UIConfig
    jobs: JobConfig
    sources: List[SourceConfig] = field(default_factory=list)


class ConfigError(RuntimeError):
    """Raised when the Bgee web configuration is missing or invalid."""


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "demo.local.yaml"


def config_path() -> Path:
    """Path from `BGEE_WEB_CONFIG_PATH`, else the demo config shipped under `web/configs/`."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_PATH


def _read_mapping(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigError(
            f"Bgee web config file not found at '{path}'. "
            f"Set {CONFIG_ENV_VAR} to a valid YAML config."
        )
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config YAML at '{path}': {exc}") from exc

    document = document or {}
    if isinstance(document, dict):
        return document
    raise ConfigError(f"Config file '{path}' must hold a YAML mapping at its top level.")


_Number = TypeVar("_Number", int, float)


def _coerce_number(value: Any, convert: Callable[[Any], _Number], key: str) -> _Number:
    try:
        return convert(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' must be a number, got {value!r}.") from exc


def _ensure_trailing_slash(value: str) -> str:
    return value if value.endswith("/") else value + "/"


def _coerce_site(section: Any) -> SiteConfig:
    if not isinstance(section, dict):
        return SiteConfig()
    defaults = SiteConfig()
    return SiteConfig(
        bgee_root_directory=str(section.get("bgee_root_directory", defaults.bgee_root_directory)),
        images_root_directory=_ensure_trailing_slash(
            str(section.get("images_root_directory", defaults.images_root_directory))
        ),
        logo_images_root_directory=_ensure_trailing_slash(
            str(section.get("logo_images_root_directory", defaults.logo_images_root_directory))
        ),
        css_files_root_directory=_ensure_trailing_slash(
            str(section.get("css_files_root_directory", defaults.css_files_root_directory))
        ),
        javascript_files_root_directory=_ensure_trailing_slash(
            str(section.get("javascript_files_root_directory", defaults.javascript_files_root_directory))
        ),
        release=str(section.get("release", defaults.release)),
        archive=bool(section.get("archive", False)),
    )


def _coerce_sparql(section: Any) -> SparqlConfig:
    if not isinstance(section, dict):
        return SparqlConfig()
    defaults = SparqlConfig()
    current_url = str(section.get("current_url") or defaults.current_url)
    return SparqlConfig(
        current_url=current_url,
        # The stable URL is the current one unless the release has its own.
        stable_url=str(section.get("stable_url") or current_url),
        stable_graph=str(section.get("stable_graph") or defaults.stable_graph),
        timeout_s=_coerce_number(section.get("timeout_s", defaults.timeout_s), float, "sparql.timeout_s"),
    )


def _coerce_ui(section: Any) -> UIConfig:
    if not isinstance(section, dict):
        return UIConfig()
    max_calls = _coerce_number(section.get("max_expression_calls", 100), int, "ui.max_expression_calls")
    if max_calls < 1:
        raise ConfigError("'ui.max_expression_calls' must be a positive integer.")
    return UIConfig(max_expression_calls=max_calls)


def _coerce_jobs(section: Any) -> JobConfig:
    if not isinstance(section, dict):
        return JobConfig()
    max_jobs = _coerce_number(section.get("max_jobs_per_user", 3), int, "jobs.max_jobs_per_user")
    return JobConfig(max_jobs_per_user=max_jobs)


def _coerce_date(value: Any, key: str) -> Optional[date]:
    if value is None or value == "":
        return None
    # PyYAML already turns unquoted ISO dates into date objects.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ConfigError(f"'{key}' must be a date formatted as YYYY-MM-DD.") from exc


def _coerce_sources(section: Any) -> List[SourceConfig]:
    if not section:
        return []
    if not isinstance(section, list):
        raise ConfigError("'sources' must be a list.")

    coerced: List[SourceConfig] = []
    for idx, item in enumerate(section):
        if not isinstance(item, dict):
            raise ConfigError(f"Source #{idx} in 'sources' must be a mapping.")
        try:
            sid = int(item["id"])
            name = str(item["name"])
        except KeyError as exc:
            raise ConfigError(f"Source #{idx} in 'sources' is missing required key: {exc}.") from exc
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Source #{idx} in 'sources' has a non-integer id.") from exc
        release_version = item.get("release_version")
        coerced.append(
            SourceConfig(
                id=sid,
                name=name,
                description=str(item.get("description") or ""),
                base_url=str(item.get("base_url") or ""),
                xref_url=str(item.get("xref_url") or ""),
                experiment_url=str(item.get("experiment_url") or ""),
                evidence_url=str(item.get("evidence_url") or ""),
                release_date=_coerce_date(item.get("release_date"), f"sources[{idx}].release_date"),
                release_version=str(release_version) if release_version is not None else None,
                to_display=bool(item.get("to_display", True)),
                category=str(item.get("category") or "Other"),
                display_order=_coerce_number(
                    item.get("display_order", idx), int, f"sources[{idx}].display_order"
                ),
            )
        )
    return coerced


_CACHED_CONFIG: Optional[AppConfig] = None


def load_config(force_reload: bool = False) -> AppConfig:
    """Return the process-wide configuration, reading it on first use or when `force_reload` is set."""
    global _CACHED_CONFIG
    if force_reload or _CACHED_CONFIG is None:
        raw = _read_mapping(config_path())
        _CACHED_CONFIG = AppConfig(
            raw=raw,
            site=_coerce_site(raw.get("site")),
            sparql=_coerce_sparql(raw.get("sparql")),
            ui=_coerce_ui(raw.get("ui")),
            jobs=_coerce_jobs(raw.get("jobs")),
            sources=_coerce_sources(raw.get("sources")),
        )
    return _CACHED_CONFIG


__all__ = [
    "AppConfig",
    "SiteConfig",
    "SparqlConfig",
    "UIConfig",
    "JobConfig",
    "SourceConfig",
    "ConfigError",
    "CONFIG_ENV_VAR",
    "config_path",
    "load_config",
]
