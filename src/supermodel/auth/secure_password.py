"""Secure password support for models.

A model class opts in with ``has_secure_password``:

    class User(Base):
        table_name = "users"
        has_secure_password = True          # digest in "passwordDigest"
        bcrypt_rounds = 10

    class Legacy(Base):
        has_secure_password = "hashedPw"    # digest in a custom column

The declaration is resolved once, when the class is created, into a
PasswordConfig: either NoPassword or SecurePassword(column, rounds).

Staged password -> digest column on save:
- UNSET (nothing staged): digest untouched
- "" (after str()): digest untouched
- None: digest cleared
- anything else, whitespace included: bcrypt digest
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from supermodel.auth.password import (
    DEFAULT_BCRYPT_ROUNDS,
    MAX_BCRYPT_ROUNDS,
    MIN_BCRYPT_ROUNDS,
    PasswordService,
    get_password_service,
)
from supermodel.core.types import UNSET
from supermodel.errors import ConfigurationError, PasswordMismatch
from supermodel.hooks.types import InterceptResult, PersistContext

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_DIGEST_FIELD = "passwordDigest"
PASSWORD_FIELD = "password"


@dataclass(frozen=True)
class NoPassword:
    """The model does not store passwords."""

    enabled = False
    column = None


@dataclass(frozen=True)
class SecurePassword:
    """The model hashes a staged password into ``column``.

    Attributes:
        column: Attribute holding the bcrypt digest
        rounds: bcrypt work factor
    """

    column: str = DEFAULT_PASSWORD_DIGEST_FIELD
    rounds: int = DEFAULT_BCRYPT_ROUNDS

    enabled = True

    @property
    def service(self) -> PasswordService:
        return get_password_service(self.rounds)


PasswordConfig = NoPassword | SecurePassword


def resolve_password_config(declared: Any, rounds: Any = DEFAULT_BCRYPT_ROUNDS) -> PasswordConfig:
    """Turn class-level declarations into a PasswordConfig.

    Args:
        declared: ``has_secure_password`` (False, True or a column name)
        rounds: ``bcrypt_rounds``

    Raises:
        ConfigurationError: For any other declaration or an invalid work factor
    """
    if declared is False or declared is None:
        return NoPassword()

    if declared is True:
        column = DEFAULT_PASSWORD_DIGEST_FIELD
    elif isinstance(declared, str) and declared.strip():
        column = declared
    else:
        raise ConfigurationError(
            f"has_secure_password must be a bool or a column name, got {declared!r}"
        )

    if column == PASSWORD_FIELD:
        raise ConfigurationError(
            f"has_secure_password cannot store the digest in '{PASSWORD_FIELD}', "
            "the name of the write-only password field"
        )

    if isinstance(rounds, bool) or not isinstance(rounds, int):
        raise ConfigurationError(f"bcrypt_rounds must be an integer, got {rounds!r}")
    if not MIN_BCRYPT_ROUNDS <= rounds <= MAX_BCRYPT_ROUNDS:
        raise ConfigurationError(
            f"bcrypt_rounds must be between {MIN_BCRYPT_ROUNDS} and "
            f"{MAX_BCRYPT_ROUNDS}, got {rounds}"
        )

    return SecurePassword(column=column, rounds=rounds)


def is_blank(value: Any) -> bool:
    """True for UNSET and for values whose string form is empty."""
    if value is UNSET:
        return True
    return value is not None and str(value) == ""


async def hash_password(ctx: PersistContext) -> InterceptResult | None:
    """Pre-persist interceptor turning the staged password into a digest.

    The plaintext never reaches the payload, whatever the outcome.
    """
    ctx.discard(PASSWORD_FIELD)

    config = type(ctx.model).password_config
    if not config.enabled:
        return None

    staged = ctx.staged.get(PASSWORD_FIELD, UNSET)
    if is_blank(staged):
        return None

    if staged is None:
        logger.debug("Clearing '%s' on '%s'", config.column, ctx.table_name)
        return InterceptResult(update={config.column: None})

    digest = await asyncio.to_thread(config.service.hash, str(staged))
    return InterceptResult(update={config.column: digest})


async def authenticate(model: Any, candidate: Any) -> Any:
    """Check ``candidate`` against the model's stored digest.

    Returns:
        The model, on an exact match

    Raises:
        PasswordMismatch: No candidate, no stored digest, or no match
        ConfigurationError: The model class has no secure password
    """
    config = type(model).password_config
    if not config.enabled:
        raise ConfigurationError(
            f"{type(model).__name__} does not declare has_secure_password"
        )

    if candidate is None or candidate is UNSET:
        raise PasswordMismatch("No password supplied")

    digest = model.get(config.column)
    if not digest:
        raise PasswordMismatch("No password digest is stored")

    matched = await asyncio.to_thread(config.service.verify, str(candidate), digest)
    if not matched:
        raise PasswordMismatch()
    return model
