import os

SECRET_KEY = "test-secret"

API_BASE_URL = os.getenv("API_BASE_URL", "http://api.test/api/v1")
API_TIMEOUT = 2.0

PUBLIC_BASE_URL = "http://console.test"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
