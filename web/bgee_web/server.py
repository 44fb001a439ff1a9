"""HTTP layer: a FastAPI app handing every page request to the FrontController."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse

from bgee_web.config import AppConfig, load_config
from bgee_web.controller import FrontController
from bgee_web.request_params import from_multi_dict

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    controller: Optional[FrontController] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    cfg = config or load_config()
    front_controller = controller or FrontController(config=cfg)

    app = FastAPI(
        title="Bgee",
        description="Bgee: a dataBase for Gene Expression Evolution",
        version=cfg.site.release,
    )

    async def _render(request: Request) -> HTMLResponse:
        items = list(request.query_params.multi_items())
        if request.method == "POST":
            form = await request.form()
            items.extend((k, v) for k, v in form.multi_items() if isinstance(v, str))
        # Rendering does blocking SPARQL I/O.
        response = await run_in_threadpool(front_controller.process_request, from_multi_dict(items))
        return HTMLResponse(
            content=response.body,
            status_code=response.status_code,
            headers=response.headers,
            media_type=response.media_type,
        )

    app.add_api_route("/", _render, methods=["GET", "POST"], response_class=HTMLResponse)

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok", "release": cfg.site.release})

    logger.debug(f"Created app for {cfg.site.release}")
    return app


__all__ = ["create_app"]
