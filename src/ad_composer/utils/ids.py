import secrets


def new_id(prefix: str = "") -> str:
    """Random 16-hex-char id, optionally prefixed (e.g. "rr_1f2e...")."""
    token = secrets.token_hex(8)
    return f"{prefix}_{token}" if prefix else token
