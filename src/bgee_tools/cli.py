from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import click

from bgee_web.config import CONFIG_ENV_VAR, ConfigError, load_config
from bgee_web.controller import FrontController
from bgee_web.sparql.client import execute_sparql
from bgee_web.sparql.endpoints import get_current_endpoint, get_stable_endpoint
from bgee_web.sparql.queries import build_anat_entities_for_gene_query

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def parse_params(pairs: Tuple[str, ...]) -> Dict[str, List[str]]:
    """Group `name=value` pairs by name; repeated names give several values."""
    params: Dict[str, List[str]] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=VALUE, got {pair!r}.", param_hint="--param")
        params.setdefault(name.strip(), []).append(value)
    return params


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help=f"YAML configuration file (overrides {CONFIG_ENV_VAR}).",
)
def cli(verbose: bool, config_path: Optional[Path]) -> None:
    """CLI utilities for the Bgee web application."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    if config_path is not None:
        os.environ[CONFIG_ENV_VAR] = str(config_path)
    try:
        load_config(force_reload=True)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("render")
@click.argument("page", required=False)
@click.option("--action", default=None, help="Action of the page, e.g. 'cancel' for jobs.")
@click.option(
    "--param",
    "params",
    multiple=True,
    help="Extra request parameter as NAME=VALUE (repeat for multiple).",
)
@click.option(
    "--output",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write the page to this file instead of stdout.",
)
def render_command(
    page: Optional[str],
    action: Optional[str],
    params: Tuple[str, ...],
    output: Optional[Path],
) -> None:
    """Render a page (the home page when PAGE is omitted) as HTML."""
    request_params = parse_params(params)
    if page:
        request_params["page"] = [page]
    if action:
        request_params["action"] = [action]

    response = FrontController().process_request(request_params)
    if output is None:
        click.echo(response.body, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(response.body, encoding="utf-8")
        click.echo(f"Page written to {output} (status {response.status_code}).", err=True)
    if response.status_code >= 400:
        raise SystemExit(1)


@cli.command("serve")
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="Server host.")
@click.option("--port", type=click.IntRange(1, 65535), default=DEFAULT_PORT, show_default=True)
@click.option("--reload", is_flag=True, help="Enable auto-reload (development).")
def serve_command(host: str, port: int, reload: bool) -> None:
    """Serve the web application with uvicorn."""
    import uvicorn

    logger.info(f"Starting Bgee web on {host}:{port}")
    uvicorn.run(
        "bgee_web.server:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="debug" if logging.getLogger().isEnabledFor(logging.DEBUG) else "info",
    )


@cli.command("check-endpoint")
@click.option("--stable", is_flag=True, help="Query the stable endpoint with its graph.")
def check_endpoint_command(stable: bool) -> None:
    """Run the example SPARQL query against the configured endpoint."""
    cfg = load_config()
    endpoint = get_stable_endpoint(cfg) if stable else get_current_endpoint(cfg)
    query = build_anat_entities_for_gene_query(graph=endpoint.graph)

    result = execute_sparql(endpoint.sparql_url, query, timeout_s=cfg.sparql.timeout_s)
    if not result.ok:
        raise click.ClickException(f"{endpoint.sparql_url}: {result.error}")
    click.echo(
        f"{endpoint.label}: {result.row_count} rows from {endpoint.sparql_url} "
        f"in {result.elapsed_ms:.0f} ms."
    )


def main() -> None:  # pragma: no cover
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
