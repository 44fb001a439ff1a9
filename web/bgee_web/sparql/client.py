from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

USER_AGENT = "bgee-web/0.1 (+https://www.bgee.org)"

JSON_RESULTS = "application/sparql-results+json"
SPARQL_QUERY = "application/sparql-query"

_LIMIT_CLAUSE = re.compile(r"\blimit\s+\d+\b", flags=re.IGNORECASE)


@dataclass
class SourceResult:
    """Outcome of one query sent to a Bgee SPARQL endpoint."""

    rows: List[Dict[str, Any]]
    variables: List[str]
    row_count: int
    elapsed_ms: float
    endpoint_url: str
    status: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass
class _Attempt:
    response: Optional[requests.Response] = None
    error: Optional[str] = None
    started: float = field(default_factory=time.perf_counter)

    def finish(
        self,
        endpoint_url: str,
        rows: Optional[List[Dict[str, Any]]] = None,
        variables: Optional[List[str]] = None,
        error: Optional[str] = None,
    ) -> SourceResult:
        rows = rows or []
        return SourceResult(
            rows=rows,
            variables=variables or [],
            row_count=len(rows),
            elapsed_ms=(time.perf_counter() - self.started) * 1000.0,
            endpoint_url=endpoint_url,
            status="error" if error else "ok",
            error=error,
        )


def configure_session() -> requests.Session:
    """Session retrying transient endpoint failures on both query methods."""
    retry_policy = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "POST"),
    )
    session = requests.Session()
    for prefix in ("https://", "http://"):
        session.mount(prefix, HTTPAdapter(max_retries=retry_policy))
    session.headers["User-Agent"] = USER_AGENT
    return session


def ensure_limit(query: str, max_rows: int) -> str:
    """Cap a SELECT query at `max_rows`, replacing any LIMIT it already has.

    The clause is found with a regular expression, the query is not parsed.
    """
    clause = f"LIMIT {int(max_rows)}"
    if _LIMIT_CLAUSE.search(query):
        return _LIMIT_CLAUSE.sub(clause, query)
    return query.rstrip().rstrip(";") + "\n" + clause


def _parse_bindings(payload: Dict[str, Any]) -> Tuple[List[str], List[Dict[str, Any]]]:
    declared = (payload.get("head") or {}).get("vars")
    variables = [str(name) for name in declared] if isinstance(declared, list) else []

    bindings = (payload.get("results") or {}).get("bindings")
    if not isinstance(bindings, list):
        return variables, []

    rows = []
    for binding in bindings:
        if isinstance(binding, dict):
            rows.append(
                {
                    name: term["value"] if isinstance(term, dict) and "value" in term else term
                    for name, term in binding.items()
                }
            )
    return variables, rows


def _send(http: Any, method: str, endpoint_url: str, query: str, timeout_s: float) -> requests.Response:
    if method == "POST":
        return http.post(
            endpoint_url,
            data=query.encode("utf-8"),
            headers={"Accept": JSON_RESULTS, "Content-Type": SPARQL_QUERY},
            timeout=timeout_s,
        )
    return http.get(
        endpoint_url,
        params={"query": query},
        headers={"Accept": JSON_RESULTS},
        timeout=timeout_s,
    )


def execute_sparql(
    endpoint_url: str,
    query: str,
    timeout_s: float = 30.0,
    method_preference: str = "POST",
    session: Optional[requests.Session] = None,
) -> SourceResult:
    """
    Run `query` against `endpoint_url` and collect the JSON bindings.

    With the POST preference the query is sent as `application/sparql-query`
    and, when that request cannot be made or is refused, sent again as a GET
    `query` parameter. Endpoint failures end up in the returned result
    (`status == "error"` and a message in `error`); they are not raised.
    """
    http = session or requests
    attempt = _Attempt()
    methods = ("POST", "GET") if method_preference.upper() == "POST" else ("GET",)

    for method in methods:
        try:
            attempt.response = _send(http, method, endpoint_url, query, timeout_s)
        except requests.RequestException as exc:
            logger.debug(f"SPARQL {method} to {endpoint_url} failed: {exc}")
            attempt.response, attempt.error = None, str(exc)
            continue
        if attempt.response.ok:
            break

    response = attempt.response
    if response is None:
        logger.warning(f"SPARQL endpoint {endpoint_url} unreachable: {attempt.error}")
        return attempt.finish(endpoint_url, error=attempt.error)
    if not response.ok:
        message = f"HTTP {response.status_code}: {response.text[:500]}"
        logger.warning(f"SPARQL endpoint {endpoint_url} returned {message}")
        return attempt.finish(endpoint_url, error=message)

    try:
        payload = response.json()
    except ValueError as exc:
        return attempt.finish(endpoint_url, error=f"Failed to decode JSON from SPARQL endpoint: {exc}")
    if not isinstance(payload, dict):
        return attempt.finish(endpoint_url, error="Unexpected JSON structure from SPARQL endpoint.")

    variables, rows = _parse_bindings(payload)
    return attempt.finish(endpoint_url, rows=rows, variables=variables)


__all__ = [
    "SourceResult",
    "configure_session",
    "ensure_limit",
    "execute_sparql",
]
