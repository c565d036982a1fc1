from typing import List, Optional

from models import db
from models.experience import Experience
from services.exceptions import ExperienceNotFound, ValidationError

# largest value a 64-bit signed INTEGER column holds
MAX_ID = 2 ** 63 - 1


def parse_experience_id(value) -> int:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError("experience_id is required", field="experience_id")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError("experience_id must be an integer", field="experience_id")
    try:
        experience_id = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("experience_id must be an integer", field="experience_id")
    if not 0 < experience_id <= MAX_ID:
        raise ValidationError("experience_id is out of range", field="experience_id")
    return experience_id


def get_experience(experience_id) -> Experience:
    experience = db.session.get(Experience, parse_experience_id(experience_id))
    if not experience:
        raise ExperienceNotFound(experience_id)
    return experience


def list_experiences(query: Optional[str] = None, location: Optional[str] = None) -> List[Experience]:
    q = Experience.query
    if query:
        q = q.filter(Experience.title.ilike(f"%{query}%"))
    if location:
        q = q.filter(Experience.location.ilike(f"%{location}%"))
    return q.order_by(Experience.created_at.asc(), Experience.id.asc()).all()
