from fastapi import APIRouter, Depends

from app.api.v1.dependency import get_party_coordinator
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.party import (
    JoinPartyOut,
    LeavePartyIn,
    LeavePartyOut,
    PartyCodeIn,
    PartyStatusOut,
    StartPartyIn,
    StartPartyOut,
    UpdatePartyIn,
)
from app.domain.companion.party import PartyCoordinator

router = APIRouter(prefix="/party")


@router.post("/start")
async def start_party(
    body: StartPartyIn,
    coordinator: PartyCoordinator = Depends(get_party_coordinator),
) -> ApiOut[StartPartyOut]:
    """Start a party hosted by the caller. The host secret is returned only here."""
    result = await coordinator.start_party(body.user_id, body.secret, body.current_track)
    return ApiOut[StartPartyOut](
        results=StartPartyOut(code=result.code, secret=result.host_secret)
    )


@router.post("/join")
async def join_party(
    body: PartyCodeIn,
    coordinator: PartyCoordinator = Depends(get_party_coordinator),
) -> ApiOut[JoinPartyOut]:
    host_id = await coordinator.join_party(body.user_id, body.secret, body.party_code)
    return ApiOut[JoinPartyOut](results=JoinPartyOut(host=host_id))


@router.post("/leave")
async def leave_party(
    body: LeavePartyIn,
    coordinator: PartyCoordinator = Depends(get_party_coordinator),
) -> ApiOut[LeavePartyOut]:
    """Leave a party; the host disbands it by presenting the host secret."""
    outcome = await coordinator.leave_party(
        body.user_id,
        body.secret,
        body.party_code,
        host_secret=body.party_secret,
    )
    return ApiOut[LeavePartyOut](results=LeavePartyOut(outcome=outcome))


@router.post("/status")
async def party_status(
    body: PartyCodeIn,
    coordinator: PartyCoordinator = Depends(get_party_coordinator),
) -> ApiOut[PartyStatusOut]:
    track = await coordinator.get_status(body.user_id, body.secret, body.party_code)
    return ApiOut[PartyStatusOut](results=PartyStatusOut(track=track))


@router.post("/update")
async def update_party(
    body: UpdatePartyIn,
    coordinator: PartyCoordinator = Depends(get_party_coordinator),
) -> ApiOut[str]:
    """Replace the party's current track. Host secret required."""
    await coordinator.update_track(
        body.user_id,
        body.secret,
        body.party_code,
        body.party_secret,
        body.current_track,
    )
    return ApiOut[str](results="OK")
