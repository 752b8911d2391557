from fastapi import APIRouter, Depends

from app.api.v1.dependency import get_account_service
from app.api.v1.schemas.account import RegisterIn, RegisterOut, StatsOut
from app.api.v1.schemas.base import ApiOut, SessionIn
from app.domain.companion.account import AccountService

router = APIRouter()


@router.get("/stats")
async def stats(
    service: AccountService = Depends(get_account_service),
) -> ApiOut[StatsOut]:
    """Online and total user counts."""
    result = await service.get_stats()
    return ApiOut[StatsOut](results=StatsOut(**result.model_dump()))


@router.post("/register")
async def register(
    body: RegisterIn,
    service: AccountService = Depends(get_account_service),
) -> ApiOut[RegisterOut]:
    """Verify the caller with the identity service and issue a session secret.

    Each call invalidates any secret issued earlier for the same user.
    """
    secret = await service.register(
        user_id=body.user_id,
        capability=body.mod,
        server_id=body.server_id,
    )
    return ApiOut[RegisterOut](results=RegisterOut(secret=secret))


@router.post("/offline")
async def offline(
    body: SessionIn,
    service: AccountService = Depends(get_account_service),
) -> ApiOut[str]:
    """Log the caller out and leave or disband their party."""
    await service.logout(body.user_id, body.secret)
    return ApiOut[str](results="OK")
