from flask import Blueprint, request, jsonify

from services.experiences import get_experience, list_experiences
from utils.serializers import serialize_experience

experiences_bp = Blueprint("experiences", __name__, url_prefix="/experiences")


@experiences_bp.get("")
def list_all():
    query = (request.args.get("q") or "").strip()
    location = (request.args.get("location") or "").strip()

    rows = list_experiences(query=query or None, location=location or None)
    return jsonify([serialize_experience(e) for e in rows]), 200


@experiences_bp.get("/<int:experience_id>")
def detail(experience_id: int):
    return jsonify(serialize_experience(get_experience(experience_id))), 200
