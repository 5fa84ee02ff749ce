"""Password hashing service using bcrypt."""

from functools import lru_cache

from passlib.context import CryptContext

DEFAULT_BCRYPT_ROUNDS = 12

# bcrypt's accepted cost range
MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 31


class PasswordService:
    """Service for hashing and verifying passwords using bcrypt.

    Uses passlib's CryptContext for secure password hashing with
    automatic salt generation and configurable work factor.
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        """Initialize the password service.

        Args:
            rounds: bcrypt work factor (default 12, higher = slower + more secure)
        """
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hash string (includes algorithm, rounds, salt, and hash)
        """
        return self._context.hash(password)

    def verify(self, password: str, hash: str) -> bool:
        """Verify a password against a hash.

        Args:
            password: Plain text password to verify
            hash: Bcrypt hash to verify against

        Returns:
            True if password matches, False otherwise (including malformed hashes)
        """
        try:
            return self._context.verify(password, hash)
        except (ValueError, TypeError):
            return False


def digest_rounds(digest: str) -> int:
    """Read the work factor embedded in a bcrypt digest ("$2b$12$..." -> 12)."""
    parts = digest.split("$")
    if len(parts) < 4 or not parts[2].isdigit():
        raise ValueError("Not a bcrypt digest")
    return int(parts[2])


@lru_cache(maxsize=None)
def get_password_service(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> PasswordService:
    """Shared PasswordService per work factor."""
    return PasswordService(rounds=rounds)
