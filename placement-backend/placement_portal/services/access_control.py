# access_control.py
from __future__ import annotations

import enum
from types import MappingProxyType
from typing import AbstractSet

from placement_portal.errors import Forbidden
from placement_portal.models.user import Role, User


class Operation(str, enum.Enum):
    LIST_JOBS = "list_jobs"
    GET_JOB = "get_job"
    CREATE_JOB = "create_job"
    LIST_APPLICATIONS = "list_applications"
    CREATE_APPLICATION = "create_application"
    UPDATE_APPLICATION_STATUS = "update_application_status"
    VIEW_STATS = "view_stats"
    SET_EMPLOYER_APPROVAL = "set_employer_approval"


ANY_AUTHENTICATED: frozenset[Role] = frozenset(Role)

PERMISSIONS: MappingProxyType[Operation, frozenset[Role]] = MappingProxyType(
    {
        Operation.LIST_JOBS: ANY_AUTHENTICATED,
        Operation.GET_JOB: ANY_AUTHENTICATED,
        Operation.CREATE_JOB: frozenset({Role.EMPLOYER}),
        Operation.LIST_APPLICATIONS: ANY_AUTHENTICATED,
        Operation.CREATE_APPLICATION: frozenset({Role.STUDENT}),
        Operation.UPDATE_APPLICATION_STATUS: frozenset({Role.EMPLOYER, Role.ADMIN, Role.OFFICER}),
        Operation.VIEW_STATS: frozenset({Role.ADMIN, Role.OFFICER}),
        Operation.SET_EMPLOYER_APPROVAL: frozenset({Role.ADMIN, Role.OFFICER}),
    }
)

_FORBIDDEN_MESSAGES = {
    Operation.CREATE_JOB: "Only employers can post jobs",
    Operation.CREATE_APPLICATION: "Only students can apply",
    Operation.SET_EMPLOYER_APPROVAL: "Only officers and admins can approve employers",
}


def authorize(user: User, required_roles: AbstractSet[Role], message: str | None = None) -> None:
    """Raise ``Forbidden`` unless ``user.role`` is one of ``required_roles``."""
    if Role(user.role) not in required_roles:
        raise Forbidden(message)


def authorize_operation(user: User, operation: Operation) -> None:
    authorize(user, PERMISSIONS[operation], _FORBIDDEN_MESSAGES.get(operation))
