import os

from .base import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env()

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_JSON = True

AUTO_INIT_DB = False

# Tests always run against the default policy.
PAYROLL_POLICY: dict = {}
