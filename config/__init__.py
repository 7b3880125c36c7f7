import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, development by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def env_list(name: str) -> list[str]:
    """Comma separated environment variable as a list, blanks dropped."""
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]
