# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: responses.py
# -----------------------------------------------------------------------------
import json
from typing import Any

from fastapi.responses import JSONResponse, PlainTextResponse, Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


class PrettyJSONResponse(JSONResponse):
    """JSON body indented by two spaces and terminated by a newline."""

    def render(self, content: Any) -> bytes:
        return (
            json.dumps(content, ensure_ascii=False, allow_nan=False, indent=2) + "\n"
        ).encode("utf-8")


def error_response(message: str, status_code: int) -> PrettyJSONResponse:
    return PrettyJSONResponse({"error": message}, status_code=status_code)


def not_found_response() -> Response:
    return PlainTextResponse("Not Found", status_code=404)


def preflight_response() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


def apply_cors_headers(response: Response) -> Response:
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response
