import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8350/api/v1")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))

PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
