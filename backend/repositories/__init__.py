"""Repository layer for DB access only (CRUD + simple queries).

Repositories operate on the models in backend/models/ and never commit;
the request unit of work owns the transaction.
"""

from .base import BaseRepository
from .conversation_repo import ConversationRepository
from .file_repo import FileRepository
from .mentor_repo import MentorRepository
from .message_repo import MessageRepository
from .resource_repo import ResourceRepository
from .session_repo import SessionRepository
from .student_repo import StudentRepository
from .user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "ConversationRepository",
    "FileRepository",
    "MentorRepository",
    "MessageRepository",
    "ResourceRepository",
    "SessionRepository",
    "StudentRepository",
    "UserRepository",
]
