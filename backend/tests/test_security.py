import os
import re
import sys
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from chirpy.exceptions import HashingError, MalformedHeaderError, TokenValidationError
from chirpy.security import (
    TOKEN_ISSUER,
    get_api_key,
    get_bearer_token,
    hash_password,
    make_jwt,
    make_refresh_token,
    validate_jwt,
    verify_password,
)

SECRET = "4f0c2b9e7d1a6c3f8e5b0a9d2c7f4e1b6a3d8c5f0e7b2a9d4c1f6e3b8a5d0c7f"
LOREM = (
    "Lorem ipsum dolor sit amet consectetur adipiscing elit quisque faucibus ex sapien "
    "vitae pellentesque sem placerat in id cursus mi pretium tellus duis convallis tempus"
)


@pytest.mark.parametrize("password", ["pa$$word", "123456789", " ", LOREM])
def test_hash_and_verify(password):
    hashed = hash_password(password)

    assert hashed != password
    assert hashed.startswith("$argon2id$")
    assert verify_password(password, hashed) is True
    assert verify_password(password + "x", hashed) is False


def test_hash_is_salted():
    assert hash_password("pa$$word") != hash_password("pa$$word")


def test_verify_malformed_hash_raises():
    with pytest.raises(HashingError):
        verify_password("pa$$word", "plaintext-not-a-hash")


def test_jwt_round_trip():
    user_id = uuid.uuid4()
    token = make_jwt(user_id, SECRET, timedelta(minutes=5))

    assert token.count(".") == 2
    assert validate_jwt(token, SECRET) == str(user_id)

    claims = jwt.get_unverified_claims(token)
    assert claims["iss"] == TOKEN_ISSUER
    assert claims["sub"] == str(user_id)
    assert claims["exp"] - claims["iat"] == 300


def test_zero_ttl_token_is_expired():
    token = make_jwt(uuid.uuid4(), SECRET, timedelta(0))

    with pytest.raises(TokenValidationError, match="expired"):
        validate_jwt(token, SECRET)


def test_wrong_secret_is_rejected():
    token = make_jwt(uuid.uuid4(), SECRET)

    with pytest.raises(TokenValidationError):
        validate_jwt(token, SECRET[::-1])


def test_non_hs256_algorithm_is_rejected():
    now = int(datetime.now(timezone.utc).timestamp())
    token = jwt.encode(
        {"iss": TOKEN_ISSUER, "sub": str(uuid.uuid4()), "iat": now, "exp": now + 600},
        SECRET,
        algorithm="HS512",
    )

    with pytest.raises(TokenValidationError, match="signing method"):
        validate_jwt(token, SECRET)


def test_non_uuid_subject_is_rejected():
    token = make_jwt("not-a-user-id", SECRET)

    with pytest.raises(TokenValidationError, match="subject"):
        validate_jwt(token, SECRET)


@pytest.mark.parametrize("token", ["", "abc", "a.b.c", "Bearer abc"])
def test_garbage_token_is_rejected(token):
    with pytest.raises(TokenValidationError):
        validate_jwt(token, SECRET)


def test_get_bearer_token():
    assert get_bearer_token({"Authorization": "Bearer abc"}) == "abc"
    assert get_bearer_token({"Authorization": "  Bearer   abc  "}) == "abc"


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": ""},
        {"Authorization": "abc"},
        {"Authorization": "Bearer "},
        {"Authorization": "bearer abc"},
        {"Authorization": "Bearer abc def"},
        {"Authorization": "ApiKey abc"},
    ],
)
def test_get_bearer_token_rejects_malformed(headers):
    with pytest.raises(MalformedHeaderError):
        get_bearer_token(headers)


def test_get_api_key():
    assert get_api_key({"Authorization": "ApiKey f271c81ff7084ee5b99a5091b42d486e"}) == (
        "f271c81ff7084ee5b99a5091b42d486e"
    )

    for value in ("Bearer abc", "ApiKey", "apikey abc", "ApiKey a b"):
        with pytest.raises(MalformedHeaderError):
            get_api_key({"Authorization": value})


def test_make_refresh_token():
    tokens = {make_refresh_token() for _ in range(20)}

    assert len(tokens) == 20
    for token in tokens:
        assert re.fullmatch(r"[0-9a-f]{64}", token)
