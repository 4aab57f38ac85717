"""
Test environment. Settings are read at import time and JWT_SECRET has no
default, so the environment must be populated before any app module loads.
"""

import os

os.environ.setdefault("JWT_SECRET", "unit-test-secret-0123456789abcdef0123456789")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "dev"
# Minimum bcrypt cost keeps the suite fast.
os.environ["BCRYPT_ROUNDS"] = "4"
