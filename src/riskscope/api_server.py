from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from riskscope.config import load_config, scan_options
from riskscope.enrichment import ScanError, scan_url
from riskscope.logger import log_event
from riskscope.risk_scoring import score_url_risk

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


async def _read_json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(config: Optional[Dict[str, Any]] = None) -> FastAPI:
    config = config if config is not None else load_config()
    default_blacklist = config.get("domain_blacklist")
    options = scan_options(config)

    app = FastAPI(title="riskscope")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
        return _error(message, exc.status_code)

    @app.post("/scan-url")
    async def scan(request: Request):
        body = await _read_json_body(request)
        url = body.get("url") if isinstance(body.get("url"), str) else ""

        try:
            result = await run_in_threadpool(
                scan_url,
                url,
                blacklist=default_blacklist,
                **options,
            )
        except ScanError as e:
            log_event("scan_failed", {"url": url, "error": e.message}, level="warning")
            return _error(e.message, e.status_code)
        except Exception as e:
            log_event("scan_failed", {"url": url, "error": str(e)}, level="error")
            return _error(str(e) or "Unknown error", 500)

        return {
            "lat": result["lat"],
            "lon": result["lon"],
            "country": result["country"],
            "ip": result["ip"],
            "score": result["score"],
            "status": result["status"],
        }

    @app.post("/score")
    async def score(request: Request):
        body = await _read_json_body(request)
        url = body.get("url")
        if not isinstance(url, str) or not url.strip():
            return _error("Missing url", 400)

        blacklist = body.get("blacklist")
        if not isinstance(blacklist, list):
            blacklist = default_blacklist

        return score_url_risk(url, blacklist=blacklist).to_dict()

    return app


app = create_app()
