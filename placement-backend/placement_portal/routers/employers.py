from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from placement_portal.database import MAX_ROW_ID
from placement_portal.models.user import User
from placement_portal.routers.dependencies import get_storage, require
from placement_portal.schemas.user import EmployerApprovalUpdate, EmployerProfileRead
from placement_portal.services import application_workflow
from placement_portal.services.access_control import Operation
from placement_portal.services.storage import Storage


router = APIRouter(prefix="/employers", tags=["employers"])


@router.patch("/{user_id}/approval", response_model=EmployerProfileRead)
def set_employer_approval(
    payload: EmployerApprovalUpdate,
    user_id: int = Path(gt=0, le=MAX_ROW_ID),
    storage: Storage = Depends(get_storage),
    actor: User = Depends(require(Operation.SET_EMPLOYER_APPROVAL)),
) -> EmployerProfileRead:
    profile = application_workflow.set_employer_approval(storage, actor, user_id, payload.is_approved)
    return EmployerProfileRead.model_validate(profile)
