from flask import Blueprint, jsonify, current_app, g

from models import db
from models.user import User
from security.password import hash_password, verify_password
from security.session import create_session, revoke_session
from utils.audit import log_event
from utils.auth_context import login_required
from utils.validators import is_valid_email, json_body


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _user_payload(user: User) -> dict:
    return {"id": user.id, "email": user.email, "full_name": user.full_name}


@auth_bp.post("/register")
def register():
    data = json_body()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    full_name = (data.get("full_name") or "").strip()

    if not full_name:
        return jsonify(error="full_name is required"), 400
    if not is_valid_email(email):
        return jsonify(error="Invalid email"), 400

    min_len = current_app.config.get("PASSWORD_MIN_LEN", 8)
    if not isinstance(password, str) or len(password) < min_len:
        return jsonify(error=f"Password must be at least {min_len} characters"), 400

    if User.query.filter_by(email=email).first():
        log_event("REGISTER_FAIL_EMAIL_EXISTS", metadata={"email": email})
        return jsonify(error="Email already registered"), 409

    user = User(email=email, password_hash=hash_password(password), full_name=full_name)
    db.session.add(user)
    db.session.commit()
    log_event("REGISTER_SUCCESS", user_id=user.id)

    return jsonify(message="Registered successfully", user=_user_payload(user)), 201


@auth_bp.post("/login")
def login():
    data = json_body()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify(error="Email and password are required"), 400

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        log_event("LOGIN_FAIL", user_id=user.id if user else None, metadata={"email": email})
        return jsonify(error="Invalid credentials"), 401

    token = create_session(user.id)
    log_event("LOGIN_SUCCESS", user_id=user.id)
    return jsonify(message="Login OK", token=token, user=_user_payload(user)), 200


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(_user_payload(g.user)), 200


@auth_bp.post("/logout")
@login_required
def logout():
    revoke_session(g.session)
    log_event("LOGOUT", user_id=g.user.id)
    return jsonify(message="Logged out"), 200
