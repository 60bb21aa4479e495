import os

from config import env_entitlements, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_db"),
}

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

PRORATE_BASIC = env_flag("PRORATE_BASIC", "1")
COUNT_OPEN_SHIFT_AS_PRESENT = env_flag("COUNT_OPEN_SHIFT_AS_PRESENT", "0")
WEEKLY_REST_DAY = int(os.getenv("WEEKLY_REST_DAY", "6"))
LEAVE_ENTITLEMENTS = env_entitlements({"casual": 12, "sick": 12})
