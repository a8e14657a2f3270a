"""SQLAlchemy models for the mentorship portal.

Each model is one standalone document; embedded sub-documents live in JSON
columns and references between documents are plain id strings.
"""

from .base import Base
from .conversation import Conversation
from .mentor import Mentor
from .message import Message
from .resource import Resource
from .session import MentoringSession
from .shared_file import SharedFile
from .student import Student
from .user import User

__all__ = [
    "Base",
    "Conversation",
    "Mentor",
    "MentoringSession",
    "Message",
    "Resource",
    "SharedFile",
    "Student",
    "User",
]
