"""Common constants and enumerations."""

from enum import Enum


class UserRole(str, Enum):
    """User roles."""

    STUDENT = "STUDENT"
    PROFESSIONAL = "PROFESSIONAL"
    COMPANY = "COMPANY"
    ADMIN = "ADMIN"


class JobType(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    INTERNSHIP = "INTERNSHIP"
    CONTRACT = "CONTRACT"


class JobStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CLOSED = "CLOSED"


class ExperienceLevel(str, Enum):
    ENTRY_LEVEL = "ENTRY_LEVEL"
    MID_LEVEL = "MID_LEVEL"
    SENIOR_LEVEL = "SENIOR_LEVEL"
    LEAD_LEVEL = "LEAD_LEVEL"
    EXECUTIVE = "EXECUTIVE"


class ApplicationStatus(str, Enum):
    PENDING = "PENDING"
    REVIEWING = "REVIEWING"
    SHORTLISTED = "SHORTLISTED"
    INTERVIEWED = "INTERVIEWED"
    OFFERED = "OFFERED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


class ProjectStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class EventType(str, Enum):
    WORKSHOP = "WORKSHOP"
    NETWORKING = "NETWORKING"
    HACKATHON = "HACKATHON"
    SEMINAR = "SEMINAR"


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class ActivityType(str, Enum):
    PROJECT_UPLOAD = "PROJECT_UPLOAD"
    JOB_APPLICATION = "JOB_APPLICATION"
    JOB_POSTED = "JOB_POSTED"
    EVENT_REGISTRATION = "EVENT_REGISTRATION"
    PROJECT_FEEDBACK = "PROJECT_FEEDBACK"
    PROJECT_REVIEW = "PROJECT_REVIEW"
    JOB_REVIEW = "JOB_REVIEW"
    EVENT_REVIEW = "EVENT_REVIEW"


class NotificationType(str, Enum):
    JOB_APPLICATION = "JOB_APPLICATION"
    APPLICATION_STATUS = "APPLICATION_STATUS"
    JOB_POSTED = "JOB_POSTED"
    PROJECT_REVIEW = "PROJECT_REVIEW"
    JOB_REVIEW = "JOB_REVIEW"
    EVENT_REVIEW = "EVENT_REVIEW"
    SYSTEM_MESSAGE = "SYSTEM_MESSAGE"


class NotificationPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Roles allowed to post and manage jobs
JOB_POSTER_ROLES = (UserRole.COMPANY,)

# Roles allowed to apply for jobs
APPLICANT_ROLES = (UserRole.STUDENT, UserRole.PROFESSIONAL)

# Roles allowed to download uploaded resumes
RESUME_READER_ROLES = (UserRole.COMPANY, UserRole.PROFESSIONAL, UserRole.ADMIN)

# Application status -> timestamp column stamped when the status is set
APPLICATION_STATUS_TIMESTAMPS = {
    ApplicationStatus.REVIEWING: "reviewed_at",
    ApplicationStatus.SHORTLISTED: "shortlisted_at",
    ApplicationStatus.INTERVIEWED: "interviewed_at",
    ApplicationStatus.OFFERED: "offered_at",
    ApplicationStatus.ACCEPTED: "responded_at",
    ApplicationStatus.REJECTED: "responded_at",
    ApplicationStatus.WITHDRAWN: "responded_at",
}

# Application status -> (title, message template, priority) sent to the applicant
APPLICATION_STATUS_NOTIFICATIONS = {
    ApplicationStatus.REVIEWING: (
        "Application under review",
        "Your application for {job_title} is now being reviewed.",
        NotificationPriority.MEDIUM,
    ),
    ApplicationStatus.SHORTLISTED: (
        "You've been shortlisted!",
        "Congratulations! You have been shortlisted for {job_title}.",
        NotificationPriority.HIGH,
    ),
    ApplicationStatus.INTERVIEWED: (
        "Interview stage",
        "Your application for {job_title} has moved to the interview stage.",
        NotificationPriority.HIGH,
    ),
    ApplicationStatus.OFFERED: (
        "Job offer received!",
        "You have received an offer for {job_title}.",
        NotificationPriority.HIGH,
    ),
    ApplicationStatus.ACCEPTED: (
        "Application accepted",
        "Your application for {job_title} has been accepted.",
        NotificationPriority.HIGH,
    ),
    ApplicationStatus.REJECTED: (
        "Application update",
        "Unfortunately your application for {job_title} was not selected.",
        NotificationPriority.MEDIUM,
    ),
    ApplicationStatus.WITHDRAWN: (
        "Application withdrawn",
        "Your application for {job_title} has been withdrawn.",
        NotificationPriority.LOW,
    ),
}
DEFAULT_STATUS_NOTIFICATION = (
    "Application status updated",
    "Your application for {job_title} is now {status}.",
    NotificationPriority.MEDIUM,
)

# Salary parsing for the legacy free-text salary field ("50k - 80k", "60000")
SALARY_PATTERN = r"\d+k?(?:\s*-\s*\d+k?)?"
