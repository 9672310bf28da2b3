import logging

logger = logging.getLogger("auth")


def log_auth_event(action: str, request, user=None, status: str = "success", extra: dict | None = None):
    """Emit a structured auth event with action, acting user, subject user, ip and status."""
    actor = getattr(request, "user", None)
    payload = {
        "event": f"auth.{action}",
        "action": action,
        "ip": request.META.get("REMOTE_ADDR"),
        "status": status,
    }
    if actor is not None and getattr(actor, "is_authenticated", False):
        payload["actor_id"] = actor.id
    if user is not None:
        payload["user_id"] = getattr(user, "id", None)
        payload["email"] = getattr(user, "email", None)
        payload["role"] = getattr(user, "role", None)
    if extra:
        payload.update(extra)
    logger.info(payload)
