# gacha_fetcher.py
import re, time
from urllib.parse import urlparse, parse_qsl, urlencode
import requests

from errors import (
    ApiError, AuthExpiredError, DecodeError, InvalidUrlError, TransportError,
)
from logger import get_logger
from models import FetchCursor, WishItem
from settings import REQUEST_DELAY, REQUEST_TIMEOUT, USER_AGENT

logger = get_logger(__name__)

FETCH_PAGE_SIZE = 20
DEFAULT_RARITY = 3
AUTH_EXPIRED_RETCODE = -101
MAX_RARITY = 255
_RANK_RE = re.compile(r"\+?[0-9]+")

GLOBAL_ENDPOINT = "https://public-operation-hk4e-sg.hoyoverse.com/gacha_info/api/getGachaLog"
CN_ENDPOINT = "https://public-operation-hk4e.mihoyo.com/gacha_info/api/getGachaLog"
GLOBAL_HOST_MARKERS = ("webstatic-sea", "hk4e-api-os", "hoyoverse.com")
CN_HOST_MARKER = "mihoyo.com"

# connection errors echo the request URL; keep the authkey out of messages
_AUTHKEY_RE = re.compile(r"(authkey=)[^&\s'\"]+")

# Query params carried over from the captured URL; web UI params are dropped
AUTH_PARAM_KEYS = (
    "authkey", "authkey_ver", "sign_type", "auth_appid",
    "lang", "device_type", "game_biz", "region",
)

# Banner codes used by Hoyoverse -> banner category.
# 400 is the second Character Event Wish and counts as "character".
GACHA_TYPES = {
    "301": "character",
    "400": "character",
    "302": "weapon",
    "200": "standard",
    "500": "chronicled",
}

# Fetch order for fetch_all_wishes
BANNER_CODES = [
    ("character", ["301", "400"]),
    ("weapon", ["302"]),
    ("standard", ["200"]),
    ("chronicled", ["500"]),
]

HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json, text/plain, */*",
}


def map_gacha_type(gacha_type: str) -> str:
    return GACHA_TYPES.get(gacha_type, "unknown")


def _hostname(url: str) -> str:
    try:
        p = urlparse(url)
        host = p.hostname
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL: {e}") from e
    if p.scheme not in ("http", "https"):
        raise InvalidUrlError(f"Invalid URL: unsupported scheme {p.scheme!r}")
    if not host:
        raise InvalidUrlError("No hostname in URL")
    return host


def _is_global(hostname: str) -> bool:
    return any(marker in hostname for marker in GLOBAL_HOST_MARKERS)


def api_endpoint(url: str) -> str:
    """Pick the public-operation endpoint for the captured URL's region."""
    hostname = _hostname(url)
    if _is_global(hostname):
        return GLOBAL_ENDPOINT
    if CN_HOST_MARKER in hostname:
        return CN_ENDPOINT
    raise InvalidUrlError(f"Unknown hostname: {hostname}")


def auth_params(url: str) -> list:
    """Keep only the session params the API needs, in their original order."""
    hostname = _hostname(url)
    query = urlparse(url).query
    params = [(k, v) for k, v in parse_qsl(query, keep_blank_values=True) if k in AUTH_PARAM_KEYS]

    if not any(k == "authkey" for k, _ in params):
        raise InvalidUrlError("Missing authkey parameter")
    # game_biz is required by the API but missing from some captured URLs
    if not any(k == "game_biz" for k, _ in params):
        params.append(("game_biz", "hk4e_global" if _is_global(hostname) else "hk4e_cn"))
    return params


def build_page_url(endpoint: str, params: list, gacha_type: str, cursor: FetchCursor) -> str:
    query = list(params) + [
        ("gacha_type", gacha_type),
        ("page", str(cursor.page)),
        ("size", str(FETCH_PAGE_SIZE)),
    ]
    if cursor.has_cursor:
        query.append(("end_id", cursor.end_id))
    return f"{endpoint}?{urlencode(query)}"


def _request_json(url: str):
    try:
        r = requests.get(url, headers=HEADERS, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise TransportError(_AUTHKEY_RE.sub(r"\1***", f"Request failed: {e}")) from e
    if not r.ok:
        raise TransportError(f"HTTP {r.status_code}: {r.reason or 'Unknown'} - Body: {r.text}")
    try:
        return r.json()
    except ValueError as e:
        raise DecodeError(f"Failed to parse response: {e}") from e


def _string_or_number(row: dict, key: str) -> str:
    value = row.get(key)
    # bool is an int subclass but never a valid code
    if isinstance(value, bool):
        raise DecodeError(f"Failed to parse response: {key} has unexpected type bool")
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    raise DecodeError(f"Failed to parse response: {key} must be a string or integer")


def _string_field(row: dict, key: str) -> str:
    value = row.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"Failed to parse response: {key} must be a string")
    return value


def parse_response(payload) -> list:
    """
    Validate a getGachaLog body and return its list with rank_type and
    gacha_type coerced to strings. Non-zero retcodes raise.
    """
    if not isinstance(payload, dict):
        raise DecodeError("Failed to parse response: expected a JSON object")
    retcode = payload.get("retcode")
    if isinstance(retcode, bool) or not isinstance(retcode, int):
        raise DecodeError("Failed to parse response: missing retcode")

    if retcode != 0:
        if retcode == AUTH_EXPIRED_RETCODE:
            raise AuthExpiredError("Authkey has expired. Please run the script again to get a new URL.")
        message = payload.get("message")
        raise ApiError(retcode, message if isinstance(message, str) and message else None)

    data = payload.get("data")
    if data is None:
        raise DecodeError("No data in response")
    if not isinstance(data, dict) or not isinstance(data.get("list"), list):
        raise DecodeError("Failed to parse response: data.list must be a list")

    rows = []
    for raw in data["list"]:
        if not isinstance(raw, dict):
            raise DecodeError("Failed to parse response: list entries must be objects")
        rows.append({
            "id": _string_field(raw, "id"),
            "name": _string_field(raw, "name"),
            "rank_type": _string_or_number(raw, "rank_type"),
            "item_type": _string_field(raw, "item_type"),
            "time": _string_field(raw, "time"),
            "gacha_type": _string_or_number(raw, "gacha_type"),
        })
    return rows


def parse_rarity(rank: str) -> int:
    """Unsigned 8-bit parse of rank_type; anything else is DEFAULT_RARITY."""
    if _RANK_RE.fullmatch(rank) and int(rank) <= MAX_RARITY:
        return int(rank)
    return DEFAULT_RARITY


def to_wish_item(row: dict) -> WishItem:
    return WishItem(
        id=row["id"],
        name=row["name"],
        rarity=parse_rarity(row["rank_type"]),
        item_type="character" if row["item_type"].lower() == "character" else "weapon",
        time=row["time"],                         # passed through untouched
        banner=map_gacha_type(row["gacha_type"]),
    )


def fetch_banner(api_base_url: str, gacha_type: str) -> list:
    """Walk every page of one gacha_type, newest first."""
    endpoint = api_endpoint(api_base_url)
    params = auth_params(api_base_url)
    cursor, wishes = FetchCursor(), []

    while True:
        url = build_page_url(endpoint, params, gacha_type, cursor)
        logger.debug("Fetching gacha_type=%s page=%d", gacha_type, cursor.page)
        rows = parse_response(_request_json(url))
        logger.debug("Page %d returned %d items for gacha_type=%s", cursor.page, len(rows), gacha_type)
        if not rows:
            break

        fresh = []
        for row in rows:
            if row["gacha_type"] != gacha_type or row["id"] in cursor.seen_ids:
                logger.debug("Filtered out item id=%s gacha_type=%s", row["id"], row["gacha_type"])
                continue
            cursor.advance(row["id"])
            fresh.append(to_wish_item(row))

        # stale or duplicate page
        if not fresh:
            logger.debug("No new items after filtering, stopping gacha_type=%s", gacha_type)
            break

        wishes.extend(fresh)
        # a short page is the last one; duplicates also shorten it
        if len(fresh) < FETCH_PAGE_SIZE:
            break

        cursor.next_page()
        time.sleep(REQUEST_DELAY)

    logger.info("Fetched %d wishes for gacha_type=%s", len(wishes), gacha_type)
    return wishes


def fetch_all_wishes(api_base_url: str, banners) -> list:
    """
    Fetch every selected banner category and concatenate the results in
    BANNER_CODES order. Unknown banner names are ignored; the first error
    aborts the whole fetch.
    """
    selected = set(banners)
    all_wishes = []
    for banner, gacha_types in BANNER_CODES:
        if banner not in selected:
            continue
        for gacha_type in gacha_types:
            all_wishes.extend(fetch_banner(api_base_url, gacha_type))
    logger.info("Fetched %d wishes in total", len(all_wishes))
    return all_wishes
