"""FastAPI app exposing condition evaluation over HTTP."""

from __future__ import annotations

import json
import logging
import math
import os
import sys
import time
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


_load_env_file(ROOT / "app" / ".env")

from condkit import (
    COLLECTION_OPERATORS,
    COMMON_OPERATORS,
    OPERATORS,
    SCALAR_OPERATORS,
    ConditionParsingError,
    ConditionWireError,
    condition_hash,
    condition_to_wire,
    evaluate_condition,
    get_value,
    parse_condition,
    validate_condition,
)
from condkit.conditions import iter_atomic


def _read_log_level() -> int:
    name = os.getenv("CONDKIT_LOG_LEVEL", "").strip().upper() or "INFO"
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO


LOG_LEVEL = _read_log_level()
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("condkit.api")

DEFAULT_MAX_DEPTH = 32


def _read_max_depth() -> int | None:
    raw = os.getenv("CONDKIT_MAX_DEPTH", "").strip()
    if not raw:
        return DEFAULT_MAX_DEPTH
    try:
        value = int(raw)
    except ValueError:
        logger.warning("config_invalid name=CONDKIT_MAX_DEPTH value=%s using=%s", raw, DEFAULT_MAX_DEPTH)
        return DEFAULT_MAX_DEPTH
    return value if value > 0 else None


MAX_DEPTH = _read_max_depth()
REQ_SLOW_MS = float(os.getenv("CONDKIT_REQ_SLOW_MS", "250"))
APP_ENV = os.getenv("APP_ENV", os.getenv("ENV", "dev")).strip().lower() or "dev"
IS_DEV = APP_ENV == "dev"

app = FastAPI(title="condkit")
logger.info("app_env=%s max_depth=%s req_slow_ms=%.1f", APP_ENV, MAX_DEPTH, REQ_SLOW_MS)


@app.middleware("http")
async def timing_middleware(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    total_ms = (time.perf_counter() - start) * 1000
    route = request.scope.get("route")
    route_name = getattr(route, "name", None) or "unknown"
    logger.info(
        "%s %s %s route=%s total_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        route_name,
        total_ms,
    )
    if total_ms >= REQ_SLOW_MS:
        logger.warning(
            "slow_request method=%s path=%s route=%s total_ms=%.1f status=%s",
            request.method,
            request.url.path,
            route_name,
            total_ms,
            response.status_code,
        )
    if IS_DEV:
        response.headers["X-Req-MS"] = f"{total_ms:.1f}"
        response.headers["X-Route"] = route_name
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return _error_response("INTERNAL_ERROR", "Unexpected server error", detail={"error": str(exc)}, status=500)


def _error_response(code: str, message: str, path: str | None = None, detail: dict | None = None, status: int = 400) -> JSONResponse:
    body = {
        "ok": False,
        "errors": [{"code": code, "message": message, "path": path, "detail": detail}],
        "warnings": [],
    }
    return JSONResponse(jsonable_encoder(body), status_code=status)


def _ok_response(payload: dict, warnings: list | None = None, status: int = 200) -> JSONResponse:
    body = {"ok": True, **payload, "errors": [], "warnings": warnings or []}
    return JSONResponse(jsonable_encoder(body), status_code=status)


def _validation_response(errors: list, status: int = 400) -> JSONResponse:
    body = {
        "ok": False,
        "errors": [
            {"code": e.get("code"), "message": e.get("message"), "path": e.get("path"), "detail": None}
            for e in errors
        ],
        "warnings": [],
        "data": None,
    }
    return JSONResponse(jsonable_encoder(body), status_code=status)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number: {name}")


def _finite_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite number: {raw}")
    return value


async def _read_body(request: Request) -> dict | JSONResponse:
    # NaN and Infinity are not JSON and cannot be echoed back
    try:
        body = json.loads(
            await request.body(), parse_constant=_reject_constant, parse_float=_finite_float
        )
    except ValueError:
        return _error_response("BODY_INVALID", "Request body must be valid JSON")
    if not isinstance(body, dict):
        return _error_response("BODY_INVALID", "Request body must be a JSON object")
    return body


def _condition_paths(condition) -> list[str]:
    return sorted({leaf.key for leaf in iter_atomic(condition)})


@app.get("/health")
async def health() -> dict:
    return {"ok": True}


@app.get("/operators")
async def list_operators() -> dict:
    return {
        "ok": True,
        "common": list(COMMON_OPERATORS),
        "scalar": list(SCALAR_OPERATORS),
        "collection": list(COLLECTION_OPERATORS),
        "all": list(OPERATORS),
    }


@app.post("/conditions/validate")
async def validate_condition_route(request: Request):
    body = await _read_body(request)
    if isinstance(body, JSONResponse):
        return body
    if "condition" not in body:
        return _error_response("CONDITION_REQUIRED", "condition is required", "condition")
    result = validate_condition(body.get("condition"), depth_limit=MAX_DEPTH)
    if not result.ok:
        logger.info("condition_invalid errors=%s", len(result.errors))
        return _validation_response(result.errors)
    try:
        digest = condition_hash(result.condition)
    except ConditionWireError as exc:
        return _error_response(exc.code, exc.message, exc.path)
    return _ok_response(
        {
            "condition": condition_to_wire(result.condition),
            "hash": digest,
            "paths": _condition_paths(result.condition),
        }
    )


@app.post("/conditions/evaluate")
async def evaluate_condition_route(request: Request):
    body = await _read_body(request)
    if isinstance(body, JSONResponse):
        return body
    if "condition" not in body:
        return _error_response("CONDITION_REQUIRED", "condition is required", "condition")
    if "object" not in body:
        return _error_response("OBJECT_REQUIRED", "object is required", "object")
    try:
        condition = parse_condition(body.get("condition"), depth_limit=MAX_DEPTH)
    except ConditionParsingError as exc:
        logger.info("condition_invalid errors=%s", len(exc.errors))
        return _validation_response(exc.errors)
    result = evaluate_condition(body.get("object"), condition)
    return _ok_response({"result": result})


@app.post("/values/get")
async def get_value_route(request: Request):
    body = await _read_body(request)
    if isinstance(body, JSONResponse):
        return body
    path = body.get("path")
    if not isinstance(path, str):
        return _error_response("PATH_INVALID", "path must be a string", "path")
    value: Any = get_value(body.get("object"), path)
    return _ok_response({"value": value})
