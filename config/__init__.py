import os

# APP_ENV value -> settings module; anything unknown falls back to development
_ENV_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
    "ci": "config.testing",
    "dev": "config.development",
    "development": "config.development",
    "local": "config.development",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ENV_MODULES.get(env, "config.development")
