# settings.py
import os

REQUEST_DELAY = float(os.getenv("WISH_REQUEST_DELAY", "0.5"))
REQUEST_TIMEOUT = float(os.getenv("WISH_REQUEST_TIMEOUT", "15"))
USER_AGENT = os.getenv(
    "WISH_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
)

# explicit override, probed before the platform candidates
LOG_PATH_OVERRIDE = os.getenv("WISH_LOG_PATH", "").strip()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE = os.getenv("LOG_FILE", "logs/wish_fetch.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(2 * 1024 * 1024)))
LOG_BACKUPS = int(os.getenv("LOG_BACKUPS", "3"))
LOG_TO_STDOUT = os.getenv("LOG_TO_STDOUT", "true").lower() == "true"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "false").lower() == "true"

# Genshin log locations per platform, in probe order.
# {home} is USERPROFILE on Windows and HOME elsewhere; {user} is the wine user.
_LOCALLOW = "AppData/LocalLow/miHoYo"
LOG_PATH_CANDIDATES = {
    "win32": [
        "{home}/" + _LOCALLOW + "/Genshin Impact/output_log.txt",
        "{home}/" + _LOCALLOW + "/原神/output_log.txt",
    ],
    "darwin": [
        "{home}/Library/Application Support/miHoYo/Genshin Impact/output_log.txt",
    ],
    "linux": [
        "{home}/.wine/drive_c/users/{user}/" + _LOCALLOW + "/Genshin Impact/output_log.txt",
        "{home}/.local/share/Steam/steamapps/compatdata/1938010/pfx/drive_c/users/steamuser/"
        + _LOCALLOW + "/Genshin Impact/output_log.txt",
    ],
}
HOME_ENV = {"win32": "USERPROFILE", "darwin": "HOME", "linux": "HOME"}
DEFAULT_WINE_USER = "steamuser"
