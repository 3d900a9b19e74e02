from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from placement_portal.database import MAX_ROW_ID
from placement_portal.models.user import User
from placement_portal.routers.dependencies import get_storage, require
from placement_portal.schemas.job import JobCreate, JobRead
from placement_portal.services import application_workflow
from placement_portal.services.access_control import Operation
from placement_portal.services.storage import Storage


router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=list[JobRead])
def list_jobs(
    storage: Storage = Depends(get_storage),
    _user: User = Depends(require(Operation.LIST_JOBS)),
) -> list[JobRead]:
    return [JobRead.model_validate(job) for job in application_workflow.list_jobs(storage)]


@router.get("/{job_id}", response_model=JobRead)
def get_job(
    job_id: int = Path(gt=0, le=MAX_ROW_ID),
    storage: Storage = Depends(get_storage),
    _user: User = Depends(require(Operation.GET_JOB)),
) -> JobRead:
    return JobRead.model_validate(application_workflow.get_job(storage, job_id))


@router.post("", response_model=JobRead, status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    storage: Storage = Depends(get_storage),
    employer: User = Depends(require(Operation.CREATE_JOB)),
) -> JobRead:
    return JobRead.model_validate(application_workflow.create_job(storage, employer, payload))
