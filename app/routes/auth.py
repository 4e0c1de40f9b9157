from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.auth import get_access_token
from app.core.responses import success_response
from app.core.supabase import get_auth_client, get_supabase_client
from app.schemas.auth import Credentials, CurrentUser, LoginData, SignupData, SignupRequest
from app.schemas.common import ApiResponse, MessageData
from app.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", status_code=201, response_model=ApiResponse[SignupData])
def signup(
    body: SignupRequest,
    auth_client: Any = Depends(get_auth_client),
    client: Any = Depends(get_supabase_client),
) -> JSONResponse:
    return success_response(auth_service.sign_up(auth_client, client, body), 201)


@router.post("/login", response_model=ApiResponse[LoginData])
def login(body: Credentials, auth_client: Any = Depends(get_auth_client)) -> JSONResponse:
    return success_response(auth_service.log_in(auth_client, body))


@router.post("/logout", response_model=ApiResponse[MessageData])
def logout(
    access_token: str | None = Depends(get_access_token),
    auth_client: Any = Depends(get_auth_client),
) -> JSONResponse:
    return success_response(auth_service.log_out(auth_client, access_token))


@router.get("/me", response_model=ApiResponse[CurrentUser])
def me(
    access_token: str | None = Depends(get_access_token),
    auth_client: Any = Depends(get_auth_client),
    client: Any = Depends(get_supabase_client),
) -> JSONResponse:
    return success_response(auth_service.current_user(auth_client, client, access_token))
