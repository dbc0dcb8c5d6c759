"""Tests for owner token encoding and the path owner dependency."""

import base64
import json

import pytest

from tgvault.core.auth import path_owner, require_owner
from tgvault.core.owner_token import clean_username, create_owner_token, decode_owner_token
from tgvault.exceptions import AuthenticationError, ValidationError
from fastapi.security import HTTPAuthorizationCredentials


def _raw_token(payload) -> str:
    return base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")


class TestOwnerToken:

    def test_create_and_decode(self):
        payload = decode_owner_token(create_owner_token("alice", photo_url="https://t.me/a.jpg"))
        assert payload.username == "alice"
        assert payload.photo_url == "https://t.me/a.jpg"

    def test_at_prefix_is_stripped(self):
        assert decode_owner_token(create_owner_token("@alice")).username == "alice"
        assert decode_owner_token(_raw_token({"username": "@bob"})).username == "bob"

    def test_non_ascii_username(self):
        assert decode_owner_token(create_owner_token("Алиса")).username == "Алиса"

    def test_padded_token_accepted(self):
        token = base64.urlsafe_b64encode(json.dumps({"username": "al"}).encode()).decode()
        assert decode_owner_token(token).username == "al"

    def test_empty_username_cannot_be_issued(self):
        with pytest.raises(ValueError):
            create_owner_token("  @ ")

    @pytest.mark.parametrize("token", [
        "",
        "%%%",
        _raw_token(["alice"]),
        _raw_token({"name": "alice"}),
        _raw_token({"username": ""}),
        _raw_token({"username": 42}),
        _raw_token({"username": "x" * 65}),
    ])
    def test_bad_tokens_decode_to_none(self, token):
        assert decode_owner_token(token) is None

    def test_clean_username(self):
        assert clean_username("  @carol ") == "carol"
        assert clean_username("carol") == "carol"


class TestDependencies:

    def test_require_owner_missing(self):
        with pytest.raises(AuthenticationError):
            require_owner(None)

    def test_require_owner_valid(self):
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=create_owner_token("alice"))
        assert require_owner(creds).owner == "alice"

    def test_path_owner_rejects_blank(self):
        with pytest.raises(ValidationError):
            path_owner("@")

    def test_path_owner_rejects_too_long(self):
        with pytest.raises(ValidationError):
            path_owner("x" * 65)
