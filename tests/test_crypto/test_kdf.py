"""Tests for owner-id key derivation."""

import os

import pytest
from cryptography.exceptions import InvalidTag

from sealed_cache.crypto import kdf
from sealed_cache.crypto.kdf import SALT_LENGTH, crypto_supported, derive_key
from sealed_cache.exceptions import CryptoUnsupportedError

NONCE = bytes(12)


def test_crypto_supported_on_test_host():
    assert crypto_supported()


def test_same_owner_and_salt_give_same_key():
    salt = os.urandom(SALT_LENGTH)
    sealed = derive_key("u1", salt).encrypt(NONCE, b"payload", None)
    assert derive_key("u1", salt).decrypt(NONCE, sealed, None) == b"payload"


def test_different_salt_gives_unlinkable_key():
    sealed = derive_key("u1", b"a" * SALT_LENGTH).encrypt(NONCE, b"payload", None)
    with pytest.raises(InvalidTag):
        derive_key("u1", b"b" * SALT_LENGTH).decrypt(NONCE, sealed, None)


def test_different_owner_gives_different_key():
    salt = os.urandom(SALT_LENGTH)
    sealed = derive_key("u1", salt).encrypt(NONCE, b"payload", None)
    with pytest.raises(InvalidTag):
        derive_key("u2", salt).decrypt(NONCE, sealed, None)


def test_rejects_empty_owner():
    with pytest.raises(ValueError, match="owner_id"):
        derive_key("", os.urandom(SALT_LENGTH))


@pytest.mark.parametrize("length", [0, 8, 15, 17, 32])
def test_rejects_wrong_salt_length(length):
    with pytest.raises(ValueError, match="salt"):
        derive_key("u1", os.urandom(length))


def test_unsupported_host_raises(monkeypatch):
    monkeypatch.setattr(kdf, "crypto_supported", lambda: False)
    with pytest.raises(CryptoUnsupportedError):
        derive_key("u1", os.urandom(SALT_LENGTH))


@pytest.fixture
def fresh_support_check():
    crypto_supported.cache_clear()
    yield
    crypto_supported.cache_clear()


def test_self_test_error_reports_unsupported(monkeypatch, fresh_support_check):
    def broken_backend(*args, **kwargs):
        raise RuntimeError("OpenSSL self-test failed")

    monkeypatch.setattr(kdf, "AESGCM", broken_backend)
    assert crypto_supported() is False


def test_unsupported_algorithm_reports_unsupported(monkeypatch, fresh_support_check):
    from cryptography.exceptions import UnsupportedAlgorithm

    def no_pbkdf2(*args, **kwargs):
        raise UnsupportedAlgorithm("sha256 unavailable")

    monkeypatch.setattr(kdf, "PBKDF2HMAC", no_pbkdf2)
    assert crypto_supported() is False
