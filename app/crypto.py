"""
Encryption of OAuth tokens at rest using Fernet (symmetric, from cryptography).

Tokens are encrypted before being written to the token store and decrypted
only when needed for Google API calls. Handles None for optional refresh_token.
"""
from cryptography.fernet import Fernet


class TokenCipher:
    def __init__(self, key: str | bytes):
        self.fernet = Fernet(key.encode() if isinstance(key, str) else key)

    def encrypt(self, value: str) -> str:
        """Encrypt a string (e.g. access_token or refresh_token) for storage."""
        return self.fernet.encrypt(value.encode()).decode()

    def decrypt(self, value: str | None) -> str | None:
        """
        Decrypt a stored token. Returns None if value is None (e.g. optional refresh_token).
        """
        if value is None:
            return None
        return self.fernet.decrypt(value.encode()).decode()
