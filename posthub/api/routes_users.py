from __future__ import annotations

from fastapi import APIRouter, Depends

from posthub.api.deps import user_service
from posthub.schemas import LoginUserDto, RegisterUserDto, TokenDto
from posthub.services.users import UserService

router = APIRouter(prefix="/api/User", tags=["users"])


@router.post("/Register", response_model=TokenDto)
async def register(dto: RegisterUserDto, service: UserService = Depends(user_service)) -> TokenDto:
    return await service.register(dto)


@router.post("/Login", response_model=TokenDto)
async def login(dto: LoginUserDto, service: UserService = Depends(user_service)) -> TokenDto:
    return await service.login(dto)
