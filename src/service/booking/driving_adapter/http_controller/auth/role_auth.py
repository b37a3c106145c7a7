from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.booking.domain.entity.user_entity import UserEntity, UserRole
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


AUTH_COOKIE_NAME = 'fastapiusersauth'

bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
) -> UserEntity:
    """Bearer header first, then the auth cookie"""
    if credentials is not None:
        token = credentials.credentials
    return jwt_auth.get_current_user_info_from_jwt(token)


async def require_customer_or_admin(
    current_user: UserEntity = Depends(get_current_user),
) -> UserEntity:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_customer_or_admin',
        attributes={'user.id': current_user.id, 'user.role': current_user.role.value},
    ):
        if current_user.role not in (UserRole.CUSTOMER, UserRole.ADMIN):
            raise ForbiddenError("You don't have permission to perform this action")
        return current_user


async def require_admin(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
    if not current_user.is_admin:
        raise ForbiddenError('Only admins can perform this action')
    return current_user
