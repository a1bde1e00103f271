import os
from dotenv import load_dotenv

load_dotenv()

# Env configuration
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
DATABASE_URL = os.getenv("DATABASE_URL")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Gemini (text generation)
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-lite")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "60"))

# VLM Run (document parsing)
VLMRUN_BASE_URL = os.getenv("VLMRUN_BASE_URL", "https://api.vlm.run/v1")
VLMRUN_MODEL = os.getenv("VLMRUN_MODEL", "vlm-1")
VLMRUN_TIMEOUT = float(os.getenv("VLMRUN_TIMEOUT", "120"))
VLMRUN_POLL_ATTEMPTS = int(os.getenv("VLMRUN_POLL_ATTEMPTS", "30"))
VLMRUN_POLL_INTERVAL = float(os.getenv("VLMRUN_POLL_INTERVAL", "2"))

# Job posting fetch
JOB_FETCH_TIMEOUT = float(os.getenv("JOB_FETCH_TIMEOUT", "10"))

# Uploads
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
