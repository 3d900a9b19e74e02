"""Job and application workflow.

Application lifecycle::

    applied ──> reviewing ──> accepted
       │            └───────> rejected
       └──> accepted | rejected

``accepted`` and ``rejected`` are terminal. Re-setting the current status is a
no-op. Role checks happen in the router via ``access_control``; the functions
here enforce ownership, existence and uniqueness.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from types import MappingProxyType

from sqlalchemy.exc import IntegrityError

from placement_portal.errors import Conflict, Forbidden, JobNotFound, NotFound
from placement_portal.models.application import Application, ApplicationStatus
from placement_portal.models.employer_profile import EmployerProfile
from placement_portal.models.job import Job
from placement_portal.models.user import Role, User
from placement_portal.schemas.job import JobCreate
from placement_portal.services.storage import Storage


logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: MappingProxyType[ApplicationStatus, frozenset[ApplicationStatus]] = MappingProxyType(
    {
        ApplicationStatus.APPLIED: frozenset(
            {ApplicationStatus.REVIEWING, ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}
        ),
        ApplicationStatus.REVIEWING: frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}),
        ApplicationStatus.ACCEPTED: frozenset(),
        ApplicationStatus.REJECTED: frozenset(),
    }
)

TERMINAL_STATUSES = frozenset(status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


# jobs

def list_jobs(storage: Storage) -> list[Job]:
    return storage.get_jobs()


def get_job(storage: Storage, job_id: int) -> Job:
    job = storage.get_job(job_id)
    if job is None:
        raise JobNotFound()
    return job


def create_job(storage: Storage, employer: User, payload: JobCreate) -> Job:
    profile = storage.get_employer_profile(employer.id)
    if profile is None or not profile.is_approved:
        raise Forbidden("Employer account is not approved to post jobs")
    job = storage.create_job(employer_id=employer.id, **payload.model_dump())
    logger.info("jobs.create job_id=%s employer_id=%s", job.id, employer.id)
    return job


def set_employer_approval(storage: Storage, actor: User, employer_id: int, approved: bool) -> EmployerProfile:
    profile = storage.set_employer_approval(employer_id, approved)
    if profile is None:
        raise NotFound("Employer not found")
    logger.info("employers.approval employer_id=%s approved=%s actor_id=%s", employer_id, approved, actor.id)
    return profile


# applications

def create_application(storage: Storage, student: User, job_id: int) -> Application:
    if storage.get_job(job_id) is None:
        raise JobNotFound()

    if any(app.job_id == job_id for app in storage.get_applications_by_student(student.id)):
        raise Conflict("Already applied to this job")

    try:
        application = storage.create_application(
            job_id=job_id,
            student_id=student.id,
            status=ApplicationStatus.APPLIED,
        )
    except IntegrityError as exc:
        # A concurrent request committed first; the unique constraint caught it.
        storage.rollback()
        raise Conflict("Already applied to this job") from exc

    logger.info("applications.create application_id=%s job_id=%s student_id=%s", application.id, job_id, student.id)
    return application


def list_applications_for_viewer(storage: Storage, user: User) -> list[Application]:
    role = Role(user.role)
    if role == Role.STUDENT:
        return storage.get_applications_by_student(user.id)
    if role == Role.EMPLOYER:
        applications: list[Application] = []
        for job in storage.get_jobs_by_employer(user.id):
            applications.extend(storage.get_applications_by_job(job.id))
        return applications
    if role in (Role.OFFICER, Role.ADMIN):
        return storage.get_all_applications()
    return []


def update_status(storage: Storage, actor: User, application_id: int, new_status: ApplicationStatus) -> Application:
    application = storage.get_application(application_id)
    if application is None:
        raise NotFound("Application not found")

    if Role(actor.role) == Role.EMPLOYER:
        job = storage.get_job(application.job_id)
        if job is None or job.employer_id != actor.id:
            # Same answer as a missing id so other employers' applications stay invisible.
            raise NotFound("Application not found")

    current = ApplicationStatus(application.status)
    if current in TERMINAL_STATUSES and current != new_status:
        raise Conflict(f"Application is already {current.value}")
    if not can_transition(current, new_status):
        raise Conflict(f"Cannot change status from {current.value} to {new_status.value}")
    if current == new_status:
        return application

    updated = storage.update_application_status(application_id, new_status)
    logger.info(
        "applications.status application_id=%s from=%s to=%s actor_id=%s",
        application_id,
        current.value,
        new_status.value,
        actor.id,
    )
    return updated


def compute_stats(storage: Storage) -> dict:
    stats = storage.get_stats()
    stats["generated_at"] = datetime.now(timezone.utc)
    return stats
