import os, json
import logging
import secrets
import redis
from flask_login import UserMixin
from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Optional, List, Dict
from extensions import db
from src.models import AdminUser
from src.services.db_context import db_context

logger = logging.getLogger("hospital_admin.sessions")

# ✅ Redis connection setup (no network traffic until the first command)
r = redis.Redis.from_url(
    os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    decode_responses=True,
)

DEFAULT_TTL_SEC = 60 * 60 * 12

# ===============================================================
# 🪪  ADMIN SESSION
# ===============================================================
@dataclass
class AdminSession(UserMixin):
    uid: str
    phone: str
    role: str
    name: Optional[str] = None
    hospital_id: Optional[str] = None
    hospital_name: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    @property
    def is_superadmin(self) -> bool:
        return self.role == "superadmin"

    @property
    def is_hospital(self) -> bool:
        return self.role == "hospital"

    def get_id(self) -> str | None:
        # Flask-Login stores the Redis token, not the uid
        return getattr(self, "token", None)


# ✅ Helper for redis key formatting
def _key(token: str) -> str:
    return f"admin_session:{token}"


def init_app(app):
    """Point the module client at the app's REDIS_URL."""
    global r
    url = app.config.get("REDIS_URL")
    if url:
        r = redis.Redis.from_url(url, decode_responses=True)


def _ttl() -> int:
    from flask import current_app, has_app_context
    if has_app_context():
        return int(current_app.config.get("SESSION_TTL_SEC", DEFAULT_TTL_SEC))
    return DEFAULT_TTL_SEC


# ✅ Create a session for a freshly logged-in user
def start_session(user: dict, ttl_sec: int | None = None) -> str:
    token = secrets.token_urlsafe(32)
    sess = AdminSession(
        uid=user["uid"],
        phone=user["phone"],
        role=user["role"],
        name=user.get("name"),
        hospital_id=user.get("hospital_id"),
        hospital_name=user.get("hospital_name"),
    )
    save_session(token, sess, ttl_sec=ttl_sec)
    logger.info(f"[start_session] Session started for user={sess.uid}")
    return token


def save_session(token: str, sess: AdminSession, ttl_sec: int | None = None) -> bool:
    serialized = json.dumps(asdict(sess))
    return bool(r.setex(_key(token), ttl_sec or _ttl(), serialized))


# ✅ Load session, None when missing or unreadable
def load_session(token: str) -> AdminSession | None:
    if not token:
        return None
    raw = r.get(_key(token))
    if not raw:
        return None
    try:
        sess = AdminSession(**json.loads(raw))
    except (TypeError, ValueError) as e:
        logger.warning(f"[load_session] Corrupted session {token[:8]}…: {e}")
        clear_session(token)
        return None
    sess.token = token
    return sess


# ✅ Delete session on logout
def clear_session(token: str):
    if token:
        r.delete(_key(token))


def resolve_session(token: str) -> AdminSession | None:
    """
    Auth guard lookup:
    - no session → None
    - user row gone → session cleared, None
    - otherwise session refreshed from the user row
    """
    sess = load_session(token)
    if not sess:
        return None

    with db_context():
        user = db.session.get(AdminUser, sess.uid)
        if not user or not user.phone or not user.role:
            logger.info(f"[resolve_session] User {sess.uid} no longer valid, dropping session")
            clear_session(token)
            return None

        refreshed = AdminSession(
            uid=user.id,
            phone=user.phone,
            role=user.role,
            name=user.name,
            hospital_id=user.hospital_id,
            hospital_name=user.hospital_name,
            created_at=sess.created_at,
        )
    refreshed.token = token

    if refreshed != sess:
        save_session(token, refreshed)
    return refreshed


def _started_ago(created_at: str) -> str:
    try:
        created_dt = datetime.fromisoformat(created_at)
    except (TypeError, ValueError):
        return ""
    secs = int((datetime.utcnow() - created_dt).total_seconds())
    if secs < 60:
        return "Just now"
    if secs < 3600:
        return f"{secs // 60} min ago"
    return f"{secs // 3600} hr ago"


def list_active_sessions() -> List[Dict]:
    """
    Return live admin sessions for the superadmin overview.

    Each item includes uid / phone / role, created_at and a human
    "started_ago" string. Newest first.
    """
    sessions: List[Dict] = []

    try:
        for key in r.scan_iter("admin_session:*"):
            raw = r.get(key)
            if not raw:
                continue

            try:
                sess = AdminSession(**json.loads(raw))
            except (TypeError, ValueError):
                continue

            sessions.append(
                {
                    "uid": sess.uid,
                    "phone": sess.phone,
                    "role": sess.role,
                    "hospital_name": sess.hospital_name,
                    "created_at": sess.created_at,
                    "started_ago": _started_ago(sess.created_at),
                }
            )
    except redis.RedisError as e:
        # The overview still renders without the live list
        logger.warning(f"[list_active_sessions] Redis unavailable: {e}")
        return []

    sessions.sort(key=lambda s: s.get("created_at") or "", reverse=True)
    return sessions
