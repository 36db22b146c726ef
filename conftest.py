import os

from dotenv import load_dotenv

# Local overrides for test runs (never committed)
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=False)

# Importing the app builds the engine from settings, so a URL must exist first.
# Tests bind their own per-test SQLite database through dependency overrides.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./pos_test.db")
os.environ.setdefault("ENVIRONMENT", "development")

from libs.common.config import get_settings  # noqa: E402

# Clear cached settings to reload with new env vars
get_settings.cache_clear()
