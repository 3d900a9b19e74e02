from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from placement_portal.database import MAX_ROW_ID
from placement_portal.models.user import User
from placement_portal.routers.dependencies import get_storage, require
from placement_portal.schemas.application import ApplicationCreate, ApplicationRead, ApplicationStatusUpdate
from placement_portal.services import application_workflow
from placement_portal.services.access_control import Operation
from placement_portal.services.storage import Storage


router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("", response_model=list[ApplicationRead])
def list_applications(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Operation.LIST_APPLICATIONS)),
) -> list[ApplicationRead]:
    applications = application_workflow.list_applications_for_viewer(storage, current_user)
    return [ApplicationRead.model_validate(app) for app in applications]


@router.post("", response_model=ApplicationRead, status_code=status.HTTP_201_CREATED)
def create_application(
    payload: ApplicationCreate,
    storage: Storage = Depends(get_storage),
    student: User = Depends(require(Operation.CREATE_APPLICATION)),
) -> ApplicationRead:
    application = application_workflow.create_application(storage, student, payload.job_id)
    return ApplicationRead.model_validate(application)


@router.patch("/{application_id}/status", response_model=ApplicationRead)
def update_application_status(
    payload: ApplicationStatusUpdate,
    application_id: int = Path(gt=0, le=MAX_ROW_ID),
    storage: Storage = Depends(get_storage),
    actor: User = Depends(require(Operation.UPDATE_APPLICATION_STATUS)),
) -> ApplicationRead:
    application = application_workflow.update_status(storage, actor, application_id, payload.status)
    return ApplicationRead.model_validate(application)
