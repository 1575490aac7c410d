import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Academy REST backend
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8003")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

MAX_SAVE_WORKERS = int(os.getenv("MAX_SAVE_WORKERS", "4"))
SAVE_STATE_CLEAR_SECONDS = float(os.getenv("SAVE_STATE_CLEAR_SECONDS", "3"))

# Per-user rosters are dropped after this long without a request
WORKSPACE_IDLE_SECONDS = float(os.getenv("WORKSPACE_IDLE_SECONDS", "28800"))

# Serve the built-in sandbox roster instead of calling the backend
DEMO_MODE = bool(int(os.getenv("DEMO_MODE", "0")))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
