"""Shared fixtures for the wish fetch tests."""

from unittest.mock import MagicMock

import pytest

GLOBAL_URL = (
    "https://gs.hoyoverse.com/genshin/event/e20190909gacha-v3/log"
    "?win_mode=fullscreen&authkey_ver=1&sign_type=2&auth_appid=webview_gacha"
    "&init_type=301&gacha_id=abc123&lang=en&device_type=pc"
    "&authkey=a%2Bb%2Fc%3D&region=os_usa&game_biz=hk4e_global"
)


def make_row(item_id, gacha_type="301", rank_type="3", item_type="Weapon", name="Slingshot"):
    return {
        "uid": "800000000",
        "gacha_type": gacha_type,
        "item_id": "",
        "count": "1",
        "time": "2024-05-01 12:00:00",
        "name": name,
        "lang": "en-us",
        "item_type": item_type,
        "rank_type": rank_type,
        "id": str(item_id),
    }


def make_page(rows, retcode=0, message="OK"):
    return {"retcode": retcode, "message": message, "data": {"page": "1", "size": "20", "list": rows}}


def make_response(payload, status_code=200):
    resp = MagicMock()
    resp.ok = 200 <= status_code < 400
    resp.status_code = status_code
    resp.reason = "OK" if resp.ok else "Error"
    resp.text = ""
    resp.json.return_value = payload
    return resp


@pytest.fixture
def global_url():
    return GLOBAL_URL
