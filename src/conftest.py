"""Test environment defaults.

Modules read configuration at import time, so these are set before any
test module is collected.
"""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only")
os.environ.setdefault("TOKEN_SECRET", "test-reset-secret-for-unit-tests-only")
os.environ.setdefault("CLIENT_URL", "https://shop.test.local")
# Cheap hashing keeps the suite fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")
