"""SQLAlchemy-backed persistence for users, profiles, jobs and applications.

Each ``create_*`` / ``update_*`` method is a single commit. Callers that need
several writes to land together (registration) pass ``commit=False`` and call
``commit()`` themselves.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from placement_portal.models.application import Application, ApplicationStatus
from placement_portal.models.employer_profile import EmployerProfile
from placement_portal.models.job import Job
from placement_portal.models.student_profile import StudentProfile
from placement_portal.models.user import Role, User


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Storage:
    def __init__(self, db: Session):
        self.db = db

    def _save(self, obj, commit: bool):
        self.db.add(obj)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return obj

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    # users

    def get_user(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(
        self,
        *,
        username: str,
        password: str,
        role: Role,
        name: str,
        email: str,
        commit: bool = True,
    ) -> User:
        user = User(
            username=username,
            password=password,
            role=role,
            name=name,
            email=email,
            created_at=_utc_now(),
        )
        return self._save(user, commit)

    def create_student(self, *, user_id: int, commit: bool = True, **details) -> StudentProfile:
        return self._save(StudentProfile(user_id=user_id, **details), commit)

    def create_employer(self, *, user_id: int, commit: bool = True, **details) -> EmployerProfile:
        return self._save(EmployerProfile(user_id=user_id, **details), commit)

    def get_employer_profile(self, user_id: int) -> EmployerProfile | None:
        return self.db.query(EmployerProfile).filter(EmployerProfile.user_id == user_id).first()

    def set_employer_approval(self, user_id: int, approved: bool) -> EmployerProfile | None:
        profile = self.get_employer_profile(user_id)
        if profile is None:
            return None
        profile.is_approved = approved
        return self._save(profile, commit=True)

    # jobs

    def get_jobs(self) -> list[Job]:
        return self.db.query(Job).order_by(Job.id).all()

    def get_job(self, job_id: int) -> Job | None:
        return self.db.get(Job, job_id)

    def get_jobs_by_employer(self, employer_id: int) -> list[Job]:
        return self.db.query(Job).filter(Job.employer_id == employer_id).order_by(Job.id).all()

    def create_job(
        self,
        *,
        employer_id: int,
        title: str,
        description: str,
        requirements: str,
        location: str,
        salary: str | None = None,
    ) -> Job:
        job = Job(
            employer_id=employer_id,
            title=title,
            description=description,
            requirements=requirements,
            location=location,
            salary=salary,
            posted_at=_utc_now(),
        )
        return self._save(job, commit=True)

    # applications

    def get_application(self, application_id: int) -> Application | None:
        return self.db.get(Application, application_id)

    def get_applications_by_student(self, student_id: int) -> list[Application]:
        return self.db.query(Application).filter(Application.student_id == student_id).order_by(Application.id).all()

    def get_applications_by_job(self, job_id: int) -> list[Application]:
        return self.db.query(Application).filter(Application.job_id == job_id).order_by(Application.id).all()

    def get_all_applications(self) -> list[Application]:
        return self.db.query(Application).order_by(Application.id).all()

    def create_application(self, *, job_id: int, student_id: int, status: ApplicationStatus) -> Application:
        application = Application(job_id=job_id, student_id=student_id, status=status, created_at=_utc_now())
        return self._save(application, commit=True)

    def update_application_status(self, application_id: int, status: ApplicationStatus) -> Application | None:
        application = self.get_application(application_id)
        if application is None:
            return None
        application.status = status
        return self._save(application, commit=True)

    # aggregates

    def get_stats(self) -> dict:
        by_status: Counter[str] = Counter()
        for status, count in self.db.query(Application.status, func.count(Application.id)).group_by(Application.status):
            by_status[ApplicationStatus(status).value] += int(count)

        role_counts = {
            Role(role): int(count)
            for role, count in self.db.query(User.role, func.count(User.id)).group_by(User.role)
        }

        return {
            "total_jobs": int(self.db.query(func.count(Job.id)).scalar() or 0),
            "total_applications": sum(by_status.values()),
            "applications_by_status": {s.value: by_status.get(s.value, 0) for s in ApplicationStatus},
            "total_students": role_counts.get(Role.STUDENT, 0),
            "total_employers": role_counts.get(Role.EMPLOYER, 0),
        }
