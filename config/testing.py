import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

PRORATE_BASIC = True
COUNT_OPEN_SHIFT_AS_PRESENT = False
WEEKLY_REST_DAY = 6
LEAVE_ENTITLEMENTS = {"casual": 12, "sick": 12}
