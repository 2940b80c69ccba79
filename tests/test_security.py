"""Unit tests for password hashing and the token issuer."""

import unittest
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import jwt

from app.core.security import (
    TokenIssuer,
    as_utc,
    hash_password,
    password_strength_problem,
    verify_password,
)
from tests.support import make_settings


def _user(**kwargs: object) -> SimpleNamespace:
    values = {"id": 7, "email": "ana@example.org", "role": "staff"}
    values.update(kwargs)
    return SimpleNamespace(**values)


class TestPasswords(unittest.TestCase):

    def test_hash_and_verify(self) -> None:
        hashed = hash_password("Str0ng!Pass", 4)
        self.assertNotEqual(hashed, "Str0ng!Pass")
        self.assertTrue(verify_password("Str0ng!Pass", hashed))
        self.assertFalse(verify_password("str0ng!pass", hashed))

    def test_verify_against_garbage_hash_is_false(self) -> None:
        self.assertFalse(verify_password("Str0ng!Pass", "not-a-bcrypt-hash"))

    def test_strength_rules(self) -> None:
        self.assertIsNone(password_strength_problem("Str0ng!Pass"))
        self.assertIsNotNone(password_strength_problem("Sh0rt!"))
        self.assertIsNotNone(password_strength_problem("alllowercase1!"))
        self.assertIsNotNone(password_strength_problem("NoDigits!Here"))
        self.assertIsNotNone(password_strength_problem("NoSymbols123"))
        self.assertIsNotNone(password_strength_problem("A1!a" * 40))

    def test_as_utc(self) -> None:
        naive = datetime(2026, 1, 1, 12, 0)
        self.assertEqual(as_utc(naive).tzinfo, UTC)
        self.assertEqual(as_utc(naive).hour, 12)


class TestTokenIssuer(unittest.TestCase):

    def setUp(self) -> None:
        self.settings = make_settings()
        self.issuer = TokenIssuer(self.settings)

    def test_access_token_claims(self) -> None:
        token = self.issuer.issue_access_token(_user())
        claims = self.issuer.decode_access_token(token)
        self.assertEqual(claims["sub"], "7")
        self.assertEqual(claims["email"], "ana@example.org")
        self.assertEqual(claims["role"], "staff")
        self.assertEqual(claims["exp"] - claims["iat"], 60 * 60)
        self.assertIn("jti", claims)

    def test_two_tokens_for_same_account_differ(self) -> None:
        now = datetime.now(UTC)
        self.assertNotEqual(
            self.issuer.issue_access_token(_user(), now),
            self.issuer.issue_access_token(_user(), now),
        )

    def test_expired_token_rejected(self) -> None:
        token = self.issuer.issue_access_token(_user(), datetime.now(UTC) - timedelta(hours=2))
        with self.assertRaises(jwt.ExpiredSignatureError):
            self.issuer.decode_access_token(token)

    def test_other_secret_rejected(self) -> None:
        other = TokenIssuer(make_settings(JWT_SECRET="another-signing-secret-abcdefghijklmnop"))
        token = other.issue_access_token(_user())
        with self.assertRaises(jwt.InvalidSignatureError):
            self.issuer.decode_access_token(token)

    def test_token_expiry_reads_expired_tokens(self) -> None:
        issued = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)
        token = self.issuer.issue_access_token(_user(), issued)
        self.assertEqual(self.issuer.token_expiry(token), issued + timedelta(minutes=60))

    def test_token_expiry_of_garbage_is_none(self) -> None:
        self.assertIsNone(self.issuer.token_expiry("not.a.token"))

    def test_refresh_grant(self) -> None:
        now = datetime(2026, 3, 1, tzinfo=UTC)
        grant = self.issuer.issue_refresh_session(now)
        self.assertEqual(grant.issued_at, now)
        self.assertEqual(grant.expires_at, now + timedelta(days=30))
        self.assertGreaterEqual(len(grant.token), 40)
        self.assertNotEqual(grant.token, self.issuer.issue_refresh_session(now).token)
