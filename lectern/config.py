# lectern/config.py
import os

from dotenv import load_dotenv

# ---- Load env (.env) ----
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./lectern.db")
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "1") not in ("0", "false", "False")

# ---- Algolia ----
ALGOLIA_APP_ID = os.getenv("ALGOLIA_APP_ID", "")
ALGOLIA_ADMIN_KEY = os.getenv("ALGOLIA_ADMIN_KEY", "")
ALGOLIA_INDEX_NAME = os.getenv("ALGOLIA_INDEX_NAME", "posts")

# ---- S3 / object storage for post images ----
S3_BUCKET = os.getenv("S3_BUCKET", "")
S3_REGION = os.getenv("S3_REGION", "")
S3_ENDPOINT = os.getenv("S3_ENDPOINT", "")  # e.g. https://us-southeast-1.linodeobjects.com
S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY", "")
S3_SECRET_KEY = os.getenv("S3_SECRET_KEY", "")
ASSETS_BASE_URL = os.getenv("ASSETS_BASE_URL", "").rstrip("/")

# Revalidation windows (seconds)
DAILY_USER_COUNT_TTL = int(os.getenv("DAILY_USER_COUNT_TTL", "1800"))
SUBJECTS_TTL = int(os.getenv("SUBJECTS_TTL", "3600"))
