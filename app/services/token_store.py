"""
Per-user Google OAuth token records in Firestore.

Each user has one document in the configured collection (default "users");
tokens live under its "tokens" map. Writes merge into the existing document,
so a write without a refresh_token keeps the stored one. Access and refresh
tokens are Fernet-encrypted at rest (crypto.TokenCipher).
"""
from typing import Any

from crypto import TokenCipher

ENCRYPTED_FIELDS = ("access_token", "refresh_token")


class TokenStore:
    def __init__(self, client, cipher: TokenCipher, collection: str = "users"):
        self.client = client
        self.cipher = cipher
        self.collection = collection

    def _doc(self, user_id: str):
        return self.client.collection(self.collection).document(user_id)

    def save_tokens(self, user_id: str, tokens: dict[str, Any]) -> None:
        """Merge tokens into the user's record. None values are not written."""
        record = {}
        for key, value in tokens.items():
            if value is None:
                continue
            if key in ENCRYPTED_FIELDS:
                value = self.cipher.encrypt(value)
            record[key] = value
        self._doc(user_id).set({"tokens": record}, merge=True)

    def load_tokens(self, user_id: str) -> dict[str, Any] | None:
        """Decrypted token record, or None when the user never connected."""
        snapshot = self._doc(user_id).get()
        if not snapshot.exists:
            return None
        tokens = (snapshot.to_dict() or {}).get("tokens")
        if not tokens:
            return None
        tokens = dict(tokens)
        for key in ENCRYPTED_FIELDS:
            if key in tokens:
                tokens[key] = self.cipher.decrypt(tokens[key])
        return tokens

    def has_tokens(self, user_id: str) -> bool:
        return self.load_tokens(user_id) is not None
