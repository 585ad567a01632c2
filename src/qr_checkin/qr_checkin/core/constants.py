"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import ScaleHint

# Long edge in pixels for each scale hint (None = keep source dimensions).
SCALE_TARGETS = {
    ScaleHint.ORIGINAL: None,
    ScaleHint.LARGE: 800,
    ScaleHint.SMALL: 400,
}

MIN_TOKEN_LENGTH = 10

DEFAULT_CHECKIN_ENDPOINT = "/hr/attendances/qr-check-in/"
DEFAULT_CHECKIN_TIMEOUT_SECONDS = 10.0
DEFAULT_SUCCESS_REDIRECT_SECONDS = 4.0
DEFAULT_CAMERA_FPS = 15
CAMERA_WARMUP_READS = 20

ORGANIZATION_HEADER = "X-Organization-Slug"
ORGANIZATION_QUERY_PARAM = "organization_subdomain"

# Server prose that marks an "already done" answer. Must match the server exactly.
ALREADY_DONE_MARKERS = (
    "vous avez déjà pointé",
    "vous devez d'abord pointer",
)

# Fields inspected, in order, to find the message of a rejected check-in.
ERROR_MESSAGE_FIELDS = ("session_token", "employee_id", "error", "message", "detail")

MSG_CHECKIN_DEFAULT_ERROR = "Erreur lors du pointage"
MSG_NETWORK_ERROR = "Erreur réseau"
MSG_TIMEOUT = "Délai d'attente dépassé"
MSG_SERVER_ERROR = "Une erreur est survenue"
MSG_UNEXPECTED_RESPONSE = "Réponse inattendue du serveur"
MSG_CAMERA_DENIED = "Accès caméra refusé. Autorisez l'accès dans les paramètres."
MSG_CAMERA_UNAVAILABLE = "Impossible de démarrer la caméra. Essayez d'importer une image."
MSG_SCANNER_NOT_READY = "Scanner non initialisé"
MSG_IMAGE_UNREADABLE = "Impossible de lire le QR code. Vérifiez que l'image contient un QR code valide."
MSG_INVALID_JSON = "QR code JSON invalide"
MSG_INVALID_TOKEN = "Token invalide"
MSG_SCAN_FAILED = "Erreur lors du scan"

ATTENDANCE_HOME_ROUTE = "/apps/{organization}/hr/attendance"
MSG_IMAGE_MISSING = "Fichier image manquant"
MSG_EMPLOYEE_MISSING = "employee_id manquant"
