import os
from pathlib import Path

SERVICE_NAME = os.getenv("SERVICE_NAME", "unilite-proxy")
HOST = os.environ.get("HOSTNAME", "")
PORT = os.environ.get("PORT", "3001")

# The portal every origin-relative target resolves against
ORIGIN_BASE_URL = os.getenv("ORIGIN_BASE_URL", "https://gietuerp.in").rstrip("/")
ORIGIN_USER_AGENT = os.getenv(
    "ORIGIN_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

PROXY_PATH = "/proxy"
PROXY_TIMEOUT = float(os.getenv("PROXY_TIMEOUT", "30"))
PROXY_CONNECT_TIMEOUT = float(os.getenv("PROXY_CONNECT_TIMEOUT", "10"))
PROXY_MAX_REDIRECTS = int(os.getenv("PROXY_MAX_REDIRECTS", "10"))

SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(24 * 60 * 60)))
SESSION_REGISTRY = os.getenv("SESSION_REGISTRY", "InMemorySessionRegistry")

MOCK_ORIGIN_ENABLED = os.getenv("MOCK_ORIGIN_ENABLED", "true").lower() == "true"
MOCK_CAPTCHA_CODE = os.getenv("MOCK_CAPTCHA_CODE", "9G4X")

STATIC_DIR = os.getenv("STATIC_DIR", str(Path(__file__).resolve().parent / "static"))

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")
