# __init__.py
from placement_portal.models.application import Application, ApplicationStatus
from placement_portal.models.employer_profile import EmployerProfile
from placement_portal.models.job import Job
from placement_portal.models.session_record import SessionRecord
from placement_portal.models.student_profile import StudentProfile
from placement_portal.models.user import Role, User

__all__ = [
	"Application",
	"ApplicationStatus",
	"EmployerProfile",
	"Job",
	"Role",
	"SessionRecord",
	"StudentProfile",
	"User",
]
