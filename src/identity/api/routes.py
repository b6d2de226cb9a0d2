"""FastAPI endpoints for the Identity context: users and tokens."""

from fastapi import APIRouter, Depends, Path

from identity.api.schemas import (
    ExtendTokenRequest,
    IssueTokenRequest,
    RegisterUserRequest,
    StatusResponse,
    TokenResponse,
    UpdateUserRequest,
    UserResponse,
)
from shared.errors import ValidationError
from shared.web import ID_PATTERN, get_services, token_header

user_router = APIRouter(prefix="/users", tags=["users"])
token_router = APIRouter(prefix="/tokens", tags=["tokens"])


@user_router.post("", status_code=201, response_model=UserResponse)
async def register_user(body: RegisterUserRequest, services=Depends(get_services)) -> UserResponse:
    user = await services.users.register(**body.model_dump())
    return UserResponse(**user.to_public())


@user_router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str = Path(pattern=ID_PATTERN),
    token: str | None = Depends(token_header),
    services=Depends(get_services),
) -> UserResponse:
    await services.sessions.authenticate(token, user_id=user_id)
    user = await services.users.get(user_id)
    return UserResponse(**user.to_public())


@user_router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    body: UpdateUserRequest,
    user_id: str = Path(pattern=ID_PATTERN),
    token: str | None = Depends(token_header),
    services=Depends(get_services),
) -> UserResponse:
    await services.sessions.authenticate(token, user_id=user_id)
    user = await services.users.update(user_id, **body.model_dump(exclude_none=True))
    return UserResponse(**user.to_public())


@user_router.delete("/{user_id}", response_model=StatusResponse)
async def delete_user(
    user_id: str = Path(pattern=ID_PATTERN),
    token: str | None = Depends(token_header),
    services=Depends(get_services),
) -> StatusResponse:
    await services.sessions.authenticate(token, user_id=user_id)
    await services.users.delete(user_id)
    return StatusResponse()


@token_router.post("", status_code=201, response_model=TokenResponse)
async def issue_token(body: IssueTokenRequest, services=Depends(get_services)) -> TokenResponse:
    token = await services.sessions.issue_token(body.user_id, body.password)
    return TokenResponse(**token.to_document())


@token_router.put("", response_model=TokenResponse)
async def extend_token(body: ExtendTokenRequest, services=Depends(get_services)) -> TokenResponse:
    if not body.extend:
        raise ValidationError({"extend": ["Must be true to extend the token"]})
    token = await services.sessions.renew_token(body.id)
    return TokenResponse(**token.to_document())


@token_router.delete("/{token_id}", response_model=StatusResponse)
async def revoke_token(token_id: str = Path(pattern=ID_PATTERN), services=Depends(get_services)) -> StatusResponse:
    await services.sessions.revoke_token(token_id)
    return StatusResponse()
