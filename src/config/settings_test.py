"""Settings for the pytest run.

Provides the values ``config.settings`` refuses to default (``SECRET_KEY``)
and points the SQLite test database at a file so threads in the
concurrency tests share it (the in-memory shared cache fails fast on
table locks instead of waiting).
"""

import os

os.environ.setdefault("SECRET_KEY", "test-only-secret-key-not-for-production")

from config.settings import *  # noqa: E402,F401,F403
from config.settings import BASE_DIR, DATABASES  # noqa: E402

if DATABASES["default"]["ENGINE"] == "django.db.backends.sqlite3":
    DATABASES["default"]["TEST"] = {"NAME": str(BASE_DIR / "test_db.sqlite3")}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
