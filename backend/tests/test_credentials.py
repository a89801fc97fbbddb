from datetime import timedelta

import pytest
from jose import jwt

from config import settings
from models.users import UserRole
from utils.errors import InvalidTokenError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token, decode_access_token


def test_hash_is_not_plaintext_and_verifies():
    hashed = get_password_hash("Passw0rd!")
    assert hashed != "Passw0rd!"
    assert verify_password("Passw0rd!", hashed)
    assert not verify_password("passw0rd!", hashed)


def test_same_password_gets_different_salts():
    assert get_password_hash("Passw0rd!") != get_password_hash("Passw0rd!")


def test_verify_rejects_non_bcrypt_value():
    assert verify_password("Passw0rd!", "not-a-hash") is False


def test_token_round_trip():
    token = create_access_token("user-1", UserRole.STORE_OWNER)
    data = decode_access_token(token)
    assert data.user_id == "user-1"
    assert data.role == UserRole.STORE_OWNER


def test_expired_token_is_rejected():
    token = create_access_token("user-1", UserRole.ADMIN, expires_delta=timedelta(seconds=-5))
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": "user-1", "role": "ADMIN"}, "some-other-key", algorithm=settings.ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


@pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_without_known_role_is_rejected():
    token = jwt.encode({"sub": "user-1", "role": "ROOT"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)
