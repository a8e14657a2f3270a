"""
Enumerations shared by models, services and request validation.
Values are the stored/wire strings.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    STUDENT = "student"
    MENTOR = "mentor"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class SessionType(str, Enum):
    VIDEO_CALL = "video_call"
    CHAT = "chat"
    EMAIL = "email"
    PHONE = "phone"


class FeedbackSide(str, Enum):
    STUDENT = "student"
    MENTOR = "mentor"


class ResourceType(str, Enum):
    SCHOLARSHIP = "scholarship"
    CAREER_GUIDE = "career_guide"
    EXAM_GUIDE = "exam_guide"
    ARTICLE = "article"
    VIDEO = "video"
    DOCUMENT = "document"


class ResourceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"


class MessageType(str, Enum):
    TEXT = "text"
    GLOBAL = "global"
    BROADCAST = "broadcast"


CAREER_FIELDS = (
    "Engineering", "Medical", "Arts", "Commerce", "Law", "Agriculture",
    "Computer Science", "Design", "Teaching", "Business", "Sports",
    "Music", "Dance", "Literature", "Science", "Technology",
)

EXPERTISE_FIELDS = CAREER_FIELDS + ("Other",)
RESOURCE_CATEGORIES = CAREER_FIELDS + ("General",)

FILE_CATEGORIES = (
    "general", "study-materials", "assignments", "presentations",
    "resources", "templates", "guides",
)
