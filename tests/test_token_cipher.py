import pytest

from app.services.token_cipher import TokenCipherService


def test_token_cipher_roundtrip() -> None:
    cipher = TokenCipherService(secret="super-secret-key")
    plaintext = "1//refresh-token"

    encrypted = cipher.encrypt(plaintext)
    assert encrypted != plaintext
    assert cipher.decrypt(encrypted) == plaintext


def test_token_cipher_rejects_ciphertext_from_other_secret() -> None:
    encrypted = TokenCipherService(secret="one").encrypt("value")

    with pytest.raises(ValueError):
        TokenCipherService(secret="two").decrypt(encrypted)


def test_token_cipher_requires_secret() -> None:
    with pytest.raises(ValueError):
        TokenCipherService(secret="")
