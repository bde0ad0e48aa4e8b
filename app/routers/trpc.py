# app/routers/trpc.py
"""
RPC 入口（与 tRPC 的 HTTP 约定兼容）

- query：   GET  /trpc/<name>?input=<JSON>
- mutation：POST /trpc/<name>，body 即 input 的 JSON
- 成功：{"result": {"data": ...}}
- 失败：{"error": {"message", "code", "data": {"code", "httpStatus", "path", ...}}}

这里只做：查找过程 -> 校验入参 -> 调用 service -> 序列化结果；
异常统一在这里翻译成客户端可见的错误。
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Optional, Union

from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from pydantic import StrictInt, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from app.core.errors import AppError
from app.core.logging import get_logger
from app.db import get_db
from app.schemas.reading import (
    CreateAstrologyReadingInput,
    GetReadingByIdInput,
    GetUserReadingsInput,
    UploadImageInput,
)
from app.schemas.translation import CreateTranslationInput, GetTranslationsInput
from app.schemas.user import CreateUserInput, UpdateUserInput
from app.services import astrology_readings as astrology_service
from app.services import palm_readings as palm_service
from app.services import translations as translation_service
from app.services import users as user_service
from app.utils.timeutil import utcnow

logger = get_logger("rpc")

router = APIRouter(prefix="/trpc", tags=["rpc"])

ProcedureKind = Literal["query", "mutation"]

# 错误码 -> (HTTP 状态码, JSON-RPC 风格数字码)
ERROR_CODES: Dict[str, tuple] = {
    "BAD_REQUEST": (400, -32600),
    "NOT_FOUND": (404, -32004),
    "METHOD_NOT_SUPPORTED": (405, -32005),
    "CONFLICT": (409, -32009),
    "INTERNAL_SERVER_ERROR": (500, -32603),
}


@dataclass
class Procedure:
    name: str
    kind: ProcedureKind
    handler: Callable[[Session, Any], Any]
    input_adapter: Optional[TypeAdapter] = None

    def parse_input(self, raw: Any) -> Any:
        if self.input_adapter is None:
            return None
        return self.input_adapter.validate_python(raw)


PROCEDURES: Dict[str, Procedure] = {}


def procedure(name: str, kind: ProcedureKind, input_type: Any = None):
    """注册一个 RPC 过程"""
    def decorator(fn: Callable[[Session, Any], Any]):
        adapter = TypeAdapter(input_type) if input_type is not None else None
        PROCEDURES[name] = Procedure(name=name, kind=kind, handler=fn, input_adapter=adapter)
        return fn
    return decorator


# ================================== 过程注册 ==================================

@procedure("healthcheck", "query")
def _healthcheck(db: Session, _: None):
    return {"status": "ok", "timestamp": utcnow().isoformat() + "Z"}


# ---- users ----

@procedure("createUser", "mutation", CreateUserInput)
def _create_user(db: Session, payload: CreateUserInput):
    return user_service.create_user(db, payload)


@procedure("updateUser", "mutation", UpdateUserInput)
def _update_user(db: Session, payload: UpdateUserInput):
    return user_service.update_user(db, payload)


# 入参就是裸的数字 id；不接受 "5"、true 之类的隐式转换
@procedure("getUser", "query", StrictInt)
def _get_user(db: Session, user_id: int):
    return user_service.get_user(db, user_id)


# ---- palm readings ----

@procedure("uploadPalmImage", "mutation", UploadImageInput)
def _upload_palm_image(db: Session, payload: UploadImageInput):
    return palm_service.upload_palm_image(db, payload)


@procedure("getUserPalmReadings", "query", GetUserReadingsInput)
def _get_user_palm_readings(db: Session, payload: GetUserReadingsInput):
    return palm_service.get_user_palm_readings(db, payload)


@procedure("getPalmReadingById", "query", GetReadingByIdInput)
def _get_palm_reading_by_id(db: Session, payload: GetReadingByIdInput):
    return palm_service.get_palm_reading_by_id(db, payload)


# ---- astrology readings ----

@procedure("createAstrologyReading", "mutation", CreateAstrologyReadingInput)
def _create_astrology_reading(db: Session, payload: CreateAstrologyReadingInput):
    return astrology_service.create_astrology_reading(db, payload)


@procedure("getUserAstrologyReadings", "query", GetUserReadingsInput)
def _get_user_astrology_readings(db: Session, payload: GetUserReadingsInput):
    return astrology_service.get_user_astrology_readings(db, payload)


@procedure("getAstrologyReadingById", "query", GetReadingByIdInput)
def _get_astrology_reading_by_id(db: Session, payload: GetReadingByIdInput):
    return astrology_service.get_astrology_reading_by_id(db, payload)


# ---- translations ----

@procedure("getTranslations", "query", GetTranslationsInput)
def _get_translations(db: Session, payload: GetTranslationsInput):
    return translation_service.get_translations(db, payload)


@procedure("createTranslation", "mutation", CreateTranslationInput)
def _create_translation(db: Session, payload: CreateTranslationInput):
    return translation_service.create_translation(db, payload)


# ================================== 调度 ==================================

def error_response(code: str, message: str, path: str, **extra) -> JSONResponse:
    http_status, json_code = ERROR_CODES[code]
    data = {"code": code, "httpStatus": http_status, "path": path}
    data.update(extra)
    return JSONResponse(
        status_code=http_status,
        content=jsonable_encoder({"error": {"message": message, "code": json_code, "data": data}}),
    )


def _validation_issues(exc: ValidationError) -> list:
    return [
        {"path": list(err["loc"]), "message": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def dispatch(db: Session, name: str, kind: ProcedureKind, raw_input: Any) -> JSONResponse:
    proc = PROCEDURES.get(name)
    if proc is None:
        return error_response("NOT_FOUND", f'No "{kind}"-procedure on path "{name}"', name)
    if proc.kind != kind:
        return error_response(
            "METHOD_NOT_SUPPORTED",
            f'Unsupported {"GET" if kind == "query" else "POST"}-request to {proc.kind} procedure at path "{name}"',
            name,
        )

    try:
        payload = proc.parse_input(raw_input)
    except ValidationError as e:
        logger.info("rpc_invalid_input", path=name, errors=e.error_count())
        return error_response("BAD_REQUEST", "Input validation failed", name, issues=_validation_issues(e))

    try:
        result = proc.handler(db, payload)
        if proc.kind == "mutation":
            db.commit()
    except AppError as e:
        db.rollback()
        logger.info("rpc_failed", path=name, code=e.code, message=e.message)
        return error_response(e.code, e.message, name)
    except Exception as e:
        db.rollback()
        logger.exception("rpc_unhandled_error", path=name)
        return error_response("INTERNAL_SERVER_ERROR", str(e) or type(e).__name__, name)

    return JSONResponse(content={"result": {"data": jsonable_encoder(result)}})


def _decode_input(raw: Union[str, bytes, None], name: str):
    if raw is None or len(raw) == 0:
        return None, None
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw), None
    except ValueError:
        return None, error_response("BAD_REQUEST", "Input is not valid JSON", name)


@router.get("/{name}")
def call_query(
    name: str,
    input: Optional[str] = Query(None, description="JSON 编码的入参"),
    db: Session = Depends(get_db),
):
    raw, err = _decode_input(input, name)
    if err is not None:
        return err
    return dispatch(db, name, "query", raw)


@router.post("/{name}")
async def call_mutation(
    name: str,
    request: Request,
    db: Session = Depends(get_db),
):
    body = await request.body()
    raw, err = _decode_input(body, name)
    if err is not None:
        return err
    # 同步 ORM 调用放到线程池，避免阻塞事件循环
    return await run_in_threadpool(dispatch, db, name, "mutation", raw)
