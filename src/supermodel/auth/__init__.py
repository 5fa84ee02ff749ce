"""Password hashing and secure password support for models."""

from supermodel.auth.password import (
    DEFAULT_BCRYPT_ROUNDS,
    PasswordService,
    digest_rounds,
    get_password_service,
)
from supermodel.auth.secure_password import (
    DEFAULT_PASSWORD_DIGEST_FIELD,
    PASSWORD_FIELD,
    NoPassword,
    PasswordConfig,
    SecurePassword,
    authenticate,
    hash_password,
    resolve_password_config,
)

__all__ = [
    "DEFAULT_BCRYPT_ROUNDS",
    "DEFAULT_PASSWORD_DIGEST_FIELD",
    "NoPassword",
    "PASSWORD_FIELD",
    "PasswordConfig",
    "PasswordService",
    "SecurePassword",
    "authenticate",
    "digest_rounds",
    "get_password_service",
    "hash_password",
    "resolve_password_config",
]
