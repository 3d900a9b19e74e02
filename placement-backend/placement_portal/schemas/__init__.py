# __init__.py
from placement_portal.schemas.application import ApplicationCreate, ApplicationRead, ApplicationStatusUpdate
from placement_portal.schemas.auth import LoginRequest, MessageResponse, RegisterRequest
from placement_portal.schemas.job import JobCreate, JobRead
from placement_portal.schemas.stats import StatsResponse
from placement_portal.schemas.user import (
	EmployerApprovalUpdate,
	EmployerDetails,
	EmployerProfileRead,
	StudentDetails,
	UserRead,
)

__all__ = [
	"ApplicationCreate",
	"ApplicationRead",
	"ApplicationStatusUpdate",
	"EmployerApprovalUpdate",
	"EmployerDetails",
	"EmployerProfileRead",
	"JobCreate",
	"JobRead",
	"LoginRequest",
	"MessageResponse",
	"RegisterRequest",
	"StatsResponse",
	"StudentDetails",
	"UserRead",
]
