from datetime import datetime, timedelta, timezone

import pytest

from omnitrackr.utils.result import Err, ErrorCode, Ok, STATUS_CODES, ServiceError, service_result
from omnitrackr.utils.sanitization import sanitize_string, validate_color
from omnitrackr.utils.security import (
    extract_bearer_token,
    generate_session_token,
    get_password_hash,
    is_expired,
    session_expiry,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = get_password_hash("correct horse")
    assert hashed != "correct horse"
    assert hashed.startswith("$2")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_session_tokens_are_long_and_unique():
    tokens = {generate_session_token() for _ in range(50)}
    assert len(tokens) == 50
    assert all(len(t) == 64 for t in tokens)
    int(next(iter(tokens)), 16)


def test_expiry_boundaries():
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert is_expired(now, now=now)
    assert is_expired(now - timedelta(seconds=1), now=now)
    assert not is_expired(now + timedelta(seconds=1), now=now)
    assert session_expiry(60, now=now) == now + timedelta(seconds=60)


def test_naive_expiry_is_read_as_utc():
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert not is_expired(datetime(2026, 1, 1, 12, 30), now=now)
    assert is_expired(datetime(2026, 1, 1, 11, 30), now=now)


@pytest.mark.parametrize("header,expected", [
    ("Bearer abc", "abc"),
    ("bearer abc", "abc"),
    ("Basic abc", None),
    ("Bearer", None),
    ("", None),
    (None, None),
])
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_sanitize_string():
    assert sanitize_string("  <script>x</script>Run  ") == "xRun"
    assert sanitize_string(None) is None
    assert sanitize_string(5) == 5


def test_validate_color():
    assert validate_color("#fff") == "#fff"
    assert validate_color(" #A1B2C3 ") == "#A1B2C3"
    assert validate_color(None) is None
    for bad in ("fff", "#ffff", "#GGGGGG", "red"):
        with pytest.raises(ValueError):
            validate_color(bad)


def test_every_error_code_has_a_status():
    assert set(STATUS_CODES) == set(ErrorCode)
    assert STATUS_CODES[ErrorCode.DUPLICATE_NAME] == 409


class _FakeSession:
    def __init__(self):
        self.rolled_back = False

    async def rollback(self):
        self.rolled_back = True


async def test_service_result_wraps_outcomes():
    @service_result
    async def ok(db, value):
        return value * 2

    @service_result
    async def fails(db):
        raise ServiceError(ErrorCode.NOT_FOUND, "Thing not found")

    db = _FakeSession()
    assert await ok(db, 21) == Ok(42)
    assert not db.rolled_back

    result = await fails(db)
    assert isinstance(result, Err)
    assert result == Err(ErrorCode.NOT_FOUND, "Thing not found", [])
    assert db.rolled_back
