from datetime import timedelta

import pytest
from jose import jwt

from wheelapi.config import Settings
from wheelapi.core.exceptions import AuthenticationError
from wheelapi.core.security import create_identity_token, decode_identity_token
from wheelapi.models.account import AccountRole
from wheelapi.schemas.account import Identity


@pytest.fixture
def identity():
    return Identity(
        account_id="user-1",
        display_name="Ploy",
        email="ploy@example.com",
        avatar_url="https://example.com/p.png",
        role=AccountRole.STAFF,
    )


class TestIdentityToken:
    """identity 토큰 검증 테스트"""

    def test_round_trip(self, identity, test_settings):
        token = create_identity_token(identity, test_settings)

        decoded = decode_identity_token(token, test_settings)

        assert decoded == identity
        assert decoded.is_staff is True
        assert decoded.is_admin is False

    def test_wrong_secret(self, identity, test_settings):
        token = create_identity_token(identity, test_settings)
        other = Settings(_env_file=None, SECRET_KEY="another-secret")

        with pytest.raises(AuthenticationError):
            decode_identity_token(token, other)

    def test_expired(self, identity, test_settings):
        token = create_identity_token(
            identity, test_settings, expires_delta=timedelta(seconds=-10)
        )

        with pytest.raises(AuthenticationError):
            decode_identity_token(token, test_settings)

    def test_missing_subject(self, test_settings):
        token = jwt.encode({"name": "nobody"}, test_settings.SECRET_KEY, algorithm="HS256")

        with pytest.raises(AuthenticationError):
            decode_identity_token(token, test_settings)

    def test_unknown_role(self, test_settings):
        token = jwt.encode(
            {"sub": "user-1", "role": "owner"}, test_settings.SECRET_KEY, algorithm="HS256"
        )

        with pytest.raises(AuthenticationError):
            decode_identity_token(token, test_settings)

    def test_role_defaults_to_user(self, test_settings):
        token = jwt.encode({"sub": "user-1"}, test_settings.SECRET_KEY, algorithm="HS256")

        assert decode_identity_token(token, test_settings).role == AccountRole.USER
