from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from application.library import SessionService
from domain.library.errors import AuthError
from server.api.rest.dependencies import get_session_service
from server.api.rest.errors import auth_http_error
from server.models.schemas import LoginRequest, SessionResponse, SignupRequest

router = APIRouter(prefix="/api/v1", tags=["session-v1"])


@router.get("/session", response_model=SessionResponse)
async def get_session(
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session = await service.current_session()
    user = session.identity.to_record() if session.identity else None
    return SessionResponse(authenticated=session.is_authenticated, user=user)


@router.post("/session/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        identity = await service.login(email=request.email, password=request.password)
    except AuthError as e:
        raise auth_http_error(e) from e
    return SessionResponse(authenticated=True, user=identity.to_record())


@router.post("/session/signup", response_model=SessionResponse)
async def signup(
    request: SignupRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        identity = await service.signup(
            name=request.name,
            email=request.email,
            password=request.password,
        )
    except AuthError as e:
        raise auth_http_error(e) from e
    return SessionResponse(authenticated=True, user=identity.to_record())


@router.post("/session/logout", status_code=204, response_class=Response)
async def logout(
    service: SessionService = Depends(get_session_service),
) -> Response:
    await service.logout()
    return Response(status_code=204)
