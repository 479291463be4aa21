import os


def policy_from_env(prefix: str = "PAYROLL_POLICY_") -> dict:
    """Collect policy overrides such as PAYROLL_POLICY_HRA_RATE=0.5."""
    return {
        key[len(prefix):].lower(): value
        for key, value in os.environ.items()
        if key.startswith(prefix) and value.strip()
    }


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "hr_payroll"),
    }
