import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, defaulting to development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "hr_payroll.config.production"

    if env in {"test", "testing"}:
        return "hr_payroll.config.testing"

    return "hr_payroll.config.development"
