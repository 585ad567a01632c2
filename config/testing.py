import os

SECRET_KEY = "test-secret"

API_BASE_URL = os.getenv("API_BASE_URL", "http://api.test/api")
API_TOKEN = ""
ORGANIZATION_SLUG = "acme"
CHECKIN_ENDPOINT = "/hr/attendances/qr-check-in/"
CHECKIN_TIMEOUT_SECONDS = 2.0

CAMERA_SOURCE = os.getenv("CAMERA_SOURCE", "0")
CAMERA_FPS = 15

SUCCESS_REDIRECT_SECONDS = 4.0
DEFAULT_LOCATION = ""

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
