import os

# Settings are read at import time; pin the values tests rely on before any resumeiq import.
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-bytes")
os.environ.setdefault("AI_API_KEY", "test-key")
os.environ.setdefault("SENTRY_DSN", "")
