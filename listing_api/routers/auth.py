import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm

from listing_api.dependencies import UserRepositoryDependency
from listing_api.exceptions import AuthenticationError, ConflictError
from listing_api.limits import limiter
from listing_api.schemas.common import ApiResponse
from listing_api.schemas.user import Token, UserCreate, UserResponse
from listing_api.services.auth_service import (
    authenticate_user,
    create_access_token,
    get_password_hash,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("10/minute")
def register(request: Request, user_request: UserCreate, users: UserRepositoryDependency):
    if users.get_by_email(user_request.email) is not None:
        raise ConflictError("A user with this email already exists")
    user = users.add(
        email=user_request.email,
        password_hash=get_password_hash(user_request.password),
        name=user_request.name,
    )
    logger.info("Registered user %s", user.id)
    return ApiResponse(
        message="User registered successfully", data=UserResponse.model_validate(user)
    )


@router.post("/login", response_model=Token)
@limiter.limit("5/minute")
def login_for_access_token(
    request: Request,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    users: UserRepositoryDependency,
):
    user = authenticate_user(form_data.username, form_data.password, users)
    if not user:
        raise AuthenticationError("Incorrect email or password")
    if user.is_active is False:
        raise AuthenticationError("Account is deactivated")
    token = create_access_token(user.email, user.id)
    return Token(access_token=token, token_type="bearer")
