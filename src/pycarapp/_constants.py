"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8000"
USER_AGENT = "pycarapp/1"
TOKEN_STORAGE_KEY = "access_token"

LOGIN_ENDPOINT = "/api/v1/auth/login"
ME_ENDPOINT = "/api/v1/auth/me"
CARS_ENDPOINT = "/api/v1/cars/"

# ------------------------------------------------------------------
# Messages shown in the single error slot
# ------------------------------------------------------------------

MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_LOGIN_FAILED = "Login failed"
MSG_LOGIN_UNREACHABLE = "Unable to connect to login service"
MSG_CREATE_FAILED = "Failed to add car"
MSG_CREATE_UNREACHABLE = "Unable to add car"

# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

DASHBOARD_PREVIEW_LIMIT = 3
EMPTY_DASHBOARD_MESSAGE = "No cars yet."
CONNECTOR_DISPLAY_FALLBACK = "-"
