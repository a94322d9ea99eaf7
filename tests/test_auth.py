from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from glamrent.config import ALGORITHM, SECRET_KEY
from glamrent.security.auth import Role, create_access_token, decode_principal


def test_token_round_trip():
    token, _ = create_access_token({"sub": "owner-o", "role": "owner"})
    principal = decode_principal(token)
    assert principal.id == "owner-o"
    assert principal.role == Role.owner


def test_role_defaults_to_customer():
    token, _ = create_access_token({"sub": "customer-c"})
    assert decode_principal(token).role == Role.customer


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": "x", "type": "refresh"},
        {"type": "access"},
        {"sub": "x", "type": "access", "role": "admin"},
    ],
)
def test_rejects_bad_claims(claims):
    token = jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)
    with pytest.raises(HTTPException) as exc:
        decode_principal(token)
    assert exc.value.status_code == 401


def test_rejects_expired_token():
    token, _ = create_access_token({"sub": "x"}, expires_delta=timedelta(seconds=-5))
    with pytest.raises(HTTPException):
        decode_principal(token)
