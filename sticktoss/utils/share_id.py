import base64
import secrets


def generate_share_id(length: int = 10) -> str:
    """URL-safe random id for public game links."""
    raw = secrets.token_bytes(max(1, (length * 3) // 4))
    return base64.urlsafe_b64encode(raw).decode("ascii")[:length]
