from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
import structlog

from ....infrastructure.db import get_db
from ....infrastructure.metrics import registrations_total
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher
from ....application.use_cases.register_user import RegisterUser
from ....domain.exceptions import ClientInputError, EncodingError, InvalidPayload, RegistrationError
from ..schemas import RegisterReq, MessageResp

router = APIRouter(tags=["users"])
logger = structlog.get_logger()

def get_user_repository(db: Session | None = Depends(get_db)) -> UserRepository | None:
    return UserRepository(db) if db is not None else None

def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher

def _decode(raw: bytes) -> RegisterReq:
    try:
        return RegisterReq.model_validate_json(raw)
    except ValidationError as e:
        raise InvalidPayload("; ".join(err["msg"] for err in e.errors()))

def _created_response() -> JSONResponse:
    try:
        body = MessageResp(message="User created successfully").model_dump()
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=body)
    except (TypeError, ValueError) as e:
        logger.error("response_encoding_failed", error=str(e))
        raise EncodingError("Failed to encode response", e)

@router.post("/register", response_model=MessageResp, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    repo: UserRepository | None = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    uc = RegisterUser(repo=repo, hasher=hasher)
    try:
        payload = _decode(await request.body())
        # bcrypt и БД блокирующие
        await run_in_threadpool(uc.execute, payload.to_input())
    except ClientInputError as e:
        registrations_total.labels(outcome="rejected").inc()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except RegistrationError as e:
        registrations_total.labels(outcome="failed").inc()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    # Пользователь уже записан, даже если ответ не закодируется
    registrations_total.labels(outcome="created").inc()
    try:
        return _created_response()
    except EncodingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
