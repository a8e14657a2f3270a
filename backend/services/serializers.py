"""Model -> JSON-ready dict conversion shared by the route layer.

Datetimes are left as ``datetime`` objects; FastAPI encodes them as ISO-8601.
Password hashes never leave this module.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from domain.mentoring.deadlines import days_until_deadline, deadline_status
from models.base import utcnow
from models.conversation import Conversation
from models.mentor import Mentor
from models.message import Message
from models.resource import Resource
from models.session import MentoringSession
from models.shared_file import SharedFile
from models.student import Student
from models.user import User


def user_public(user: User) -> Dict[str, Any]:
    """Shape returned next to a freshly issued token."""
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "is_verified": user.is_verified,
    }


def user_brief(user: Optional[User]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "profile_picture": user.profile_picture,
    }


def user_dict(user: User) -> Dict[str, Any]:
    return {
        **user_public(user),
        "phone": user.phone,
        "profile_picture": user.profile_picture,
        "is_active": user.is_active,
        "status": user.status,
        "last_login": user.last_login,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def student_dict(student: Student, user: Optional[User] = None) -> Dict[str, Any]:
    return {
        "id": student.id,
        "user_id": student.user_id,
        "user": user_brief(user),
        "school": student.school,
        "education": student.education,
        "interests": student.interests,
        "career_goals": student.career_goals,
        "quiz_results": student.quiz_results,
        "preferences": student.preferences,
        "achievements": student.achievements,
        "scholarships": student.scholarships,
        "progress": student.progress,
        "emergency_contact": student.emergency_contact,
        "created_at": student.created_at,
        "updated_at": student.updated_at,
    }


def mentor_dict(mentor: Mentor, user: Optional[User] = None) -> Dict[str, Any]:
    return {
        "id": mentor.id,
        "user_id": mentor.user_id,
        "user": user_brief(user),
        "designation": mentor.designation,
        "organization": mentor.organization,
        "experience": mentor.experience,
        "education": mentor.education,
        "certifications": mentor.certifications,
        "expertise": mentor.expertise,
        "bio": mentor.bio,
        "languages": mentor.languages,
        "availability": {
            "schedule": mentor.availability_schedule,
            "timezone": mentor.availability_timezone,
        },
        "verification": {
            "status": mentor.verification_status,
            "verified_by": mentor.verified_by,
            "verified_at": mentor.verified_at,
            "rejection_reason": mentor.rejection_reason,
        },
        "ratings": {
            "average": mentor.rating_average,
            "total_reviews": mentor.rating_total_reviews,
            "reviews": mentor.reviews,
        },
        "achievements": mentor.achievements,
        "badges": mentor.badges,
        "stats": {
            "total_sessions": mentor.total_sessions,
            "total_hours": mentor.total_hours,
            "students_mentored": mentor.students_mentored,
            "completion_rate": mentor.completion_rate,
        },
        "preferences": mentor.preferences,
        "is_active": mentor.is_active,
        "created_at": mentor.created_at,
        "updated_at": mentor.updated_at,
    }


def session_dict(
    booking: MentoringSession,
    *,
    student_user: Optional[User] = None,
    mentor_user: Optional[User] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or utcnow()
    return {
        "id": booking.id,
        "student_id": booking.student_id,
        "mentor_id": booking.mentor_id,
        "student": {"id": booking.student_id, "user": user_brief(student_user)},
        "mentor": {"id": booking.mentor_id, "user": user_brief(mentor_user)},
        "title": booking.title,
        "description": booking.description,
        "scheduled_date": booking.scheduled_date,
        "duration": booking.duration,
        "status": booking.status,
        "session_type": booking.session_type,
        "meeting_link": booking.meeting_link,
        "meeting_id": booking.meeting_id,
        "topics": booking.topics,
        "notes": booking.notes,
        "feedback": booking.feedback,
        "cancellation": booking.cancellation,
        "actual_start_time": booking.actual_start_time,
        "actual_end_time": booking.actual_end_time,
        "actual_duration": booking.actual_duration,
        "recording_url": booking.recording_url,
        "chat_history": booking.chat_history,
        "attachments": booking.attachments,
        "follow_up": booking.follow_up,
        "duration_hours": booking.duration_hours,
        "actual_duration_hours": booking.actual_duration_hours,
        "is_upcoming": booking.is_upcoming(now),
        "is_overdue": booking.is_overdue(now),
        "created_at": booking.created_at,
        "updated_at": booking.updated_at,
    }


def resource_dict(resource: Resource, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or utcnow()
    return {
        "id": resource.id,
        "title": resource.title,
        "description": resource.description,
        "type": resource.type,
        "category": resource.category,
        "content": resource.content,
        "eligibility": resource.eligibility,
        "financial_info": resource.financial_info,
        "deadlines": resource.deadlines,
        "application_process": resource.application_process,
        "tags": resource.tags,
        "language": resource.language,
        "author": resource.author,
        "status": resource.status,
        "views": resource.views,
        "downloads": resource.downloads,
        "reviews": resource.reviews,
        "rating": {"average": resource.rating_average, "total": resource.rating_total},
        "featured": resource.featured,
        "priority": resource.priority,
        "created_by": resource.created_by,
        "approved_by": resource.approved_by,
        "approved_at": resource.approved_at,
        "days_until_deadline": days_until_deadline(resource.deadlines, now),
        "deadline_status": deadline_status(resource.deadlines, now),
        "created_at": resource.created_at,
        "updated_at": resource.updated_at,
    }


def message_dict(message: Message, sender: Optional[User] = None) -> Dict[str, Any]:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "sender": user_brief(sender),
        "content": message.content,
        "message_type": message.message_type,
        "broadcast_title": message.broadcast_title,
        "broadcast_to": message.broadcast_to,
        "read": message.read,
        "created_at": message.created_at,
    }


def conversation_dict(
    conversation: Conversation,
    *,
    student_user: Optional[User] = None,
    mentor_user: Optional[User] = None,
    last_message: Optional[Message] = None,
) -> Dict[str, Any]:
    return {
        "id": conversation.id,
        "student_id": conversation.student_id,
        "mentor_id": conversation.mentor_id,
        "student": user_brief(student_user),
        "mentor": user_brief(mentor_user),
        "status": conversation.status,
        "last_message": message_dict(last_message) if last_message else None,
        "created_at": conversation.created_at,
        "updated_at": conversation.updated_at,
    }


def file_dict(shared: SharedFile, uploader: Optional[User] = None) -> Dict[str, Any]:
    return {
        "id": shared.id,
        "title": shared.title,
        "description": shared.description,
        "filename": shared.filename,
        "original_name": shared.original_name,
        "file_size": shared.file_size,
        "mime_type": shared.mime_type,
        "category": shared.category,
        "tags": shared.tags,
        "uploaded_by": shared.uploaded_by,
        "uploader": user_brief(uploader),
        "is_public": shared.is_public,
        "download_count": shared.download_count,
        "upload_date": shared.upload_date,
        "last_modified": shared.last_modified,
    }


def page_payload(key: str, items: list, total: int, page: int, limit: int) -> Dict[str, Any]:
    """Paginated envelope: {<key>, total_pages, current_page, total}."""
    return {
        key: items,
        "total_pages": -(-total // limit) if limit else 0,
        "current_page": page,
        "total": total,
    }
