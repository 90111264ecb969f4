"""Turns a PageResult into an HTTP response.

ComponentView renders page.html with the props embedded as JSON for the
client-side component; a request that asks for application/json gets the
component name and props directly. RedirectResult becomes a redirect and
NotFoundResult a 404.
"""

from __future__ import annotations

import json
from pathlib import Path

from fastapi.encoders import jsonable_encoder
from fastapi.requests import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.templating import Jinja2Templates

from src.constellation.pages.views import ComponentView, NotFoundResult, PageResult, RedirectResult

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def wants_json(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "application/json" in accept and "text/html" not in accept


def _script_safe_json(data: object) -> str:
    # "</" would end the surrounding <script> element early
    return json.dumps(data).replace("</", "<\\/")


def render(request: Request, result: PageResult) -> Response:
    if isinstance(result, RedirectResult):
        return RedirectResponse(result.location, status_code=result.status_code)

    if isinstance(result, NotFoundResult):
        if wants_json(request):
            return JSONResponse({"error": result.message}, status_code=404)
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"message": result.message},
            status_code=404,
        )

    if not isinstance(result, ComponentView):
        raise TypeError(f"Unsupported page result: {type(result).__name__}")

    props = jsonable_encoder(result.props)
    if wants_json(request):
        return JSONResponse({"component": result.component, "props": props})

    return templates.TemplateResponse(
        request,
        "page.html",
        {
            "component": result.component,
            "title": result.title,
            "props_json": _script_safe_json(props),
        },
    )
