import os

SECRET_KEY = "test-secret"

API_BASE_URL = os.getenv("API_BASE_URL", "http://backend.test")
REQUEST_TIMEOUT = 2

MAX_SAVE_WORKERS = 2
SAVE_STATE_CLEAR_SECONDS = 3
WORKSPACE_IDLE_SECONDS = 600

DEMO_MODE = False

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
