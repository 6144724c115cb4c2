import os

_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    # MUTABAAH_ENV wins over the generic APP_ENV; anything unknown means development.
    env = (os.getenv("MUTABAAH_ENV") or os.getenv("APP_ENV") or "development").strip().lower()
    return _MODULES.get(env, "config.development")
