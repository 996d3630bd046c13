from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from listquery.core.errors import QueryArgumentError

_LOG = logging.getLogger("listquery.http")


def install_query_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(QueryArgumentError)
    async def _query_argument_error(request: Request, exc: QueryArgumentError):
        _LOG.info(
            "%s %s rejected code=%s argument=%s request_id=%s",
            request.method,
            request.url.path,
            exc.kind,
            exc.argument,
            getattr(request.state, "request_id", "-"),
        )
        return JSONResponse(status_code=400, content=exc.to_payload())
