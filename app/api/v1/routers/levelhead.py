from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import get_account_service
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.levelhead import LevelheadUpdateIn, SongInformationOut
from app.api.v1.schemas.validators import validate_user_id
from app.domain.companion.account import AccountService

router = APIRouter(prefix="/levelhead")


@router.post("/update")
async def update_track(
    body: LevelheadUpdateIn,
    service: AccountService = Depends(get_account_service),
) -> ApiOut[str]:
    """Publish the caller's current track."""
    await service.update_track(body.user_id, body.secret, body.track)
    return ApiOut[str](results="OK")


@router.get("/songInformation")
async def song_information(
    uuid: str = Query(..., description="User id, 36-char dashed UUID"),
    secret: str = Query(..., description="Partner service secret"),
    service: AccountService = Depends(get_account_service),
) -> ApiOut[SongInformationOut]:
    """Read a user's current track. Partner services only."""
    track = await service.get_track_for_service(validate_user_id(uuid), secret)
    return ApiOut[SongInformationOut](results=SongInformationOut(track=track))
