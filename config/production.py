import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_BASE_URL = os.getenv("API_BASE_URL", "https://api.example.com/api")
API_TOKEN = os.getenv("API_TOKEN", "")
ORGANIZATION_SLUG = os.getenv("ORGANIZATION_SLUG", "")
CHECKIN_ENDPOINT = os.getenv("CHECKIN_ENDPOINT", "/hr/attendances/qr-check-in/")
CHECKIN_TIMEOUT_SECONDS = float(os.getenv("CHECKIN_TIMEOUT_SECONDS", "10"))

CAMERA_SOURCE = os.getenv("CAMERA_SOURCE", "0")
CAMERA_FPS = int(os.getenv("CAMERA_FPS", "15"))

SUCCESS_REDIRECT_SECONDS = float(os.getenv("SUCCESS_REDIRECT_SECONDS", "4"))
DEFAULT_LOCATION = os.getenv("DEFAULT_LOCATION", "")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
