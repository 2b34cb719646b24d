"""
Configuration module for the Classic Wines Dashboard API
Environment-agnostic: Works locally, in Docker, and on Google Cloud
Loads environment variables and validates configuration
"""
import os
import tempfile
from pathlib import Path
from dotenv import load_dotenv

# Get project root directory (parent of src/)
PROJECT_ROOT = Path(__file__).parent.parent

# Load environment variables from .env file (if exists - local dev only)
env_file = PROJECT_ROOT / '.env'
if env_file.exists():
    load_dotenv(env_file)

# ═══════════════════════════════════════════════════════════════════
# ENVIRONMENT DETECTION
# ═══════════════════════════════════════════════════════════════════

def detect_environment() -> str:
    """
    Detect which environment we're running in

    Returns:
        'cloud_run', 'kubernetes', 'docker', or 'local'
    """
    if os.getenv('K_SERVICE'):
        return 'cloud_run'

    if os.getenv('KUBERNETES_SERVICE_HOST'):
        return 'kubernetes'

    if Path('/.dockerenv').exists():
        return 'docker'

    return 'local'

RUNTIME_ENVIRONMENT = detect_environment()


def _first_env(*names: str, default: str = '') -> str:
    """Return the first non-empty environment variable among ``names``."""
    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return default


# ═══════════════════════════════════════════════════════════════════
# WRITABLE PATHS - Handle containerized environments
# ═══════════════════════════════════════════════════════════════════

def get_writable_path(folder_name: str) -> str:
    """Get a writable path that works in all environments"""
    env_path = os.getenv(folder_name.upper() + '_FOLDER')
    if env_path:
        if os.path.isabs(env_path):
            path = Path(env_path)
        else:
            path = PROJECT_ROOT / env_path
    else:
        path = PROJECT_ROOT / folder_name

    # In containers, /app might be read-only; use /tmp as fallback
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except (PermissionError, OSError):
            path = Path(tempfile.gettempdir()) / 'classic_wines' / folder_name
            path.mkdir(parents=True, exist_ok=True)

    return str(path)

# ═══════════════════════════════════════════════════════════════════
# API SERVER
# ═══════════════════════════════════════════════════════════════════

SERVICE_NAME = 'Classic Wines Dashboard API'
SERVICE_VERSION = os.getenv('SERVICE_VERSION', '1.0.0')

API_PORT = int(os.getenv('API_PORT', '8000'))
API_HOST = os.getenv('API_HOST', '0.0.0.0')

# Cloud Run injects PORT
_cloud_run_port = os.getenv('PORT')
if _cloud_run_port:
    API_PORT = int(_cloud_run_port)

# JWT configuration
API_JWT_SECRET = os.getenv('API_JWT_SECRET', '')
API_JWT_ALGORITHM = os.getenv('API_JWT_ALGORITHM', 'HS256')
API_JWT_EXPIRY_MINUTES = int(os.getenv('API_JWT_EXPIRY_MINUTES', '720'))

# CORS configuration (comma-separated origins)
API_CORS_ORIGINS = os.getenv('API_CORS_ORIGINS', 'http://localhost:3000').split(',')

# SQLite user database path
API_USER_DB_PATH = os.getenv('API_USER_DB_PATH', str(PROJECT_ROOT / 'data' / 'users.db'))

# Auth cookies (token, user, name)
AUTH_COOKIE_SECURE = os.getenv('AUTH_COOKIE_SECURE', 'false').lower() == 'true'
AUTH_COOKIE_SAMESITE = os.getenv('AUTH_COOKIE_SAMESITE', 'lax')
MIN_PASSWORD_LENGTH = int(os.getenv('MIN_PASSWORD_LENGTH', '6'))

# Pages that require the token cookie (comma-separated prefixes)
PROTECTED_ROUTE_PREFIXES = [
    prefix.strip() for prefix in os.getenv(
        'PROTECTED_ROUTE_PREFIXES',
        '/pages/dashboard,/pages/order-manually,/pages/ai-page,'
        '/pages/po-sms-text,/pages/po-sms-screenshot,/pages/upload-pdf,'
        '/pages/upload-voice',
    ).split(',')
    if prefix.strip()
]
LOGIN_PATH = os.getenv('LOGIN_PATH', '/')

# ═══════════════════════════════════════════════════════════════════
# UPLOADS & OUTBOUND CALLS
# ═══════════════════════════════════════════════════════════════════

MAX_SCREENSHOT_BYTES = int(os.getenv('MAX_SCREENSHOT_BYTES', str(10 * 1024 * 1024)))  # 10MB
MAX_PDF_BYTES = int(os.getenv('MAX_PDF_BYTES', str(50 * 1024 * 1024)))  # 50MB per file
ALLOWED_IMAGE_FORMATS = os.getenv('ALLOWED_IMAGE_FORMATS', 'jpg,jpeg,png,gif,webp').split(',')
HTTP_TIMEOUT_SECONDS = float(os.getenv('HTTP_TIMEOUT_SECONDS', '10'))
TEMP_FOLDER = get_writable_path('temp')

# Extraction backend (PDF, voice) - same variable names as the web front-end
API_BASE_URL = _first_env('API_BASE_URL', 'NEXT_PUBLIC_API_BASE_URL', 'NEXT_PUBLIC_BASE_URL').rstrip('/')

# Google Gemini (screenshot OCR)
GOOGLE_API_KEY = os.getenv('GOOGLE_API_KEY')
GEMINI_OCR_MODEL = os.getenv('GEMINI_OCR_MODEL', 'gemini-2.5-flash')

# ═══════════════════════════════════════════════════════════════════
# ZOHO BOOKS
# ═══════════════════════════════════════════════════════════════════

ZOHO_CLIENT_ID = _first_env('ZOHO_CLIENT_ID', 'NEXT_PUBLIC_ZOHO_CLIENT_ID')
ZOHO_CLIENT_SECRET = _first_env('ZOHO_CLIENT_SECRET', 'NEXT_PUBLIC_ZOHO_CLIENT_SECRET')
ZOHO_REFRESH_TOKEN = _first_env('ZOHO_REFRESH_TOKEN', 'NEXT_PUBLIC_ZOHO_REFRESH_TOKEN')
ZOHO_ORGANIZATION_ID = os.getenv('ZOHO_ORGANIZATION_ID', '')
ZOHO_ACCOUNTS_URL = os.getenv('ZOHO_ACCOUNTS_URL', 'https://accounts.zoho.com').rstrip('/')
ZOHO_BOOKS_URL = os.getenv('ZOHO_BOOKS_URL', 'https://books.zoho.com/api/v3').rstrip('/')
ZOHO_TOKEN_EXPIRY_BUFFER_SECONDS = int(os.getenv('ZOHO_TOKEN_EXPIRY_BUFFER_SECONDS', '300'))

# ═══════════════════════════════════════════════════════════════════
# MONITORING
# ═══════════════════════════════════════════════════════════════════

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_DIR = os.getenv('LOG_DIR', str(PROJECT_ROOT / 'logs'))
LOG_FILE_MAX_MB = int(os.getenv('LOG_FILE_MAX_MB', '10'))
LOG_FILE_BACKUP_COUNT = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))


def validate_config():
    """Validate that all required configuration is present"""
    errors = []

    print(f"[CONFIG] Runtime environment: {RUNTIME_ENVIRONMENT}")

    if not API_JWT_SECRET:
        errors.append("API_JWT_SECRET is not set")

    if not API_BASE_URL:
        errors.append("API_BASE_URL (or NEXT_PUBLIC_API_BASE_URL) is not set")

    if not (ZOHO_CLIENT_ID and ZOHO_CLIENT_SECRET and ZOHO_REFRESH_TOKEN):
        errors.append("Zoho OAuth credentials (ZOHO_CLIENT_ID/SECRET/REFRESH_TOKEN) are not set")

    if not GOOGLE_API_KEY:
        print("[CONFIG] GOOGLE_API_KEY is not set - screenshot OCR is disabled")

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join(errors))

    return True


if __name__ == "__main__":
    try:
        validate_config()
        print("[OK] Configuration validated successfully")
    except ValueError as e:
        print(f"[FAIL] Configuration validation failed:\n{e}")
