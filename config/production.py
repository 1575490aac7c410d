import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8003")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

MAX_SAVE_WORKERS = int(os.getenv("MAX_SAVE_WORKERS", "4"))
SAVE_STATE_CLEAR_SECONDS = float(os.getenv("SAVE_STATE_CLEAR_SECONDS", "3"))

# Per-user rosters are dropped after this long without a request
WORKSPACE_IDLE_SECONDS = float(os.getenv("WORKSPACE_IDLE_SECONDS", "28800"))

DEMO_MODE = bool(int(os.getenv("DEMO_MODE", "0")))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
