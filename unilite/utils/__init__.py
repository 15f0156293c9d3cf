import hashlib
from typing import Optional


def mask_session(text: str, session_id: Optional[str]) -> str:
    return text.replace(session_id, f"{session_id[:4]}****") if session_id else text


def session_fingerprint(session_id: Optional[str]) -> str:
    """Provide a stable, low-leak session identifier for span attributes."""
    if not session_id:
        return "<none>"
    digest = hashlib.sha256(session_id.encode("utf-8")).hexdigest()[:12]
    return f"len={len(session_id)} sha256={digest} head={session_id[:4]}"
