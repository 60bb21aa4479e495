import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unrecognised falls back to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def env_entitlements(default: dict) -> dict:
    """Parse LEAVE_ENTITLEMENTS like "casual=12,sick=10"."""
    raw = os.getenv("LEAVE_ENTITLEMENTS", "").strip()
    if not raw:
        return dict(default)
    out = {}
    for part in raw.split(","):
        key, _, value = part.partition("=")
        if key.strip() and value.strip():
            out[key.strip().lower()] = int(value)
    return out
