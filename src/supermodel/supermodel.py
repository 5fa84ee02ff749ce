"""Supermodel: a Model with schema validation, secure passwords and CRUD helpers.

Typical setup:

    from supermodel import make_supermodel
    from supermodel.persistence import DatabaseConfig, create_adapter

    adapter = create_adapter(DatabaseConfig.from_env())
    adapter.connect()
    Base = make_supermodel(adapter)

    class User(Base):
        table_name = "users"
        has_secure_password = True
        validate = {
            "email": {"type": "string", "required": True},
            "role": {"type": "string", "choices": ["admin", "member"], "default": "member"},
        }

    user = await User.create({"email": "a@example.com", "password": "s3cret"})
    await user.authenticate("s3cret")

Class-level declarations are resolved once, when the subclass is created:
the password configuration, the augmented schema and the interceptor chain
(hashPassword first, then validateSave, then interceptors registered with
``before_persist``).
"""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from supermodel.auth.password import DEFAULT_BCRYPT_ROUNDS
from supermodel.auth.secure_password import (
    PASSWORD_FIELD,
    NoPassword,
    PasswordConfig,
    authenticate,
    hash_password,
    resolve_password_config,
)
from supermodel.errors import ConfigurationError
from supermodel.hooks.registry import InterceptorChain
from supermodel.hooks.types import SaveMethod, SaveOptions
from supermodel.model import Model, WriteOnlyField, dualmethod
from supermodel.persistence.adapter import PersistenceAdapter
from supermodel.schema.engine import augment_schema, validate_pending, validate_save
from supermodel.schema.types import Schema

logger = logging.getLogger(__name__)

HASH_PASSWORD = "hashPassword"
VALIDATE_SAVE = "validateSave"
BUILTIN_INTERCEPTORS = frozenset({HASH_PASSWORD, VALIDATE_SAVE})


class Supermodel(Model):
    """Model base class with validation, password hashing and CRUD.

    Class configuration (on top of Model's):
        has_secure_password: False, True (digest in "passwordDigest") or the
                             name of the digest attribute
        bcrypt_rounds: bcrypt work factor, 4 to 31
        validate: Schema shape (Schema, or a mapping of field definitions)
    """

    has_secure_password: ClassVar[bool | str] = False
    bcrypt_rounds: ClassVar[int] = DEFAULT_BCRYPT_ROUNDS
    validate: ClassVar[Any] = None

    password_config: ClassVar[PasswordConfig] = NoPassword()
    schema: ClassVar[Schema | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        cls.password_config = resolve_password_config(
            cls.has_secure_password, cls.bcrypt_rounds
        )
        if cls.password_config.enabled and PASSWORD_FIELD not in cls.virtuals:
            cls.password = WriteOnlyField(PASSWORD_FIELD)
            cls._collect_virtuals()

        if cls.validate is None:
            cls.schema = None
        else:
            cls.schema = augment_schema(
                Schema.from_shape(cls.validate),
                id_attribute=cls.id_attribute,
                timestamps=cls.timestamp_attributes(),
                digest_column=cls.password_config.column,
            )

        chain = InterceptorChain()
        if cls.password_config.enabled:
            chain = chain.append(HASH_PASSWORD, hash_password)
        if cls.schema is not None:
            chain = chain.append(VALIDATE_SAVE, validate_pending)
        for name, fn in cls.interceptors:
            if name not in BUILTIN_INTERCEPTORS:
                chain = chain.append(name, fn)
        cls.interceptors = chain

        logger.debug(
            "Configured %s: table=%s interceptors=%s",
            cls.__name__,
            cls.table_name,
            chain.names(),
        )

    # ------------------------------------------------------------------
    # Instance operations
    # ------------------------------------------------------------------

    def validate_save(
        self,
        attributes: Mapping[str, Any] | None = None,
        *,
        method: SaveMethod | str | None = None,
        patch: bool = False,
    ) -> dict[str, Any]:
        """Validate the instance without writing it.

        Raises:
            ConfigurationError: If the class declares no schema
            SchemaValidationError: If validation fails (instance unchanged)
        """
        if self.schema is None:
            raise ConfigurationError(f"{type(self).__name__} declares no schema")
        options = SaveOptions.build(method=method, patch=patch)
        payload = None if attributes is None else dict(attributes)
        return validate_save(self, payload, options)

    async def authenticate(self, candidate: Any) -> "Supermodel":
        """Check a plaintext password against the stored digest.

        Raises:
            PasswordMismatch: If it does not match
        """
        return await authenticate(self, candidate)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    @classmethod
    async def find_all(
        cls,
        filter: Mapping[str, Any] | None = None,
        *,
        columns: list[str] | None = None,
        limit: int | None = None,
    ) -> list["Supermodel"]:
        adapter = cls._require_adapter()
        rows = adapter.select(cls.table_name, dict(filter or {}), columns=columns, limit=limit)
        return [cls.from_row(row) for row in rows]

    @classmethod
    async def find_one(
        cls,
        query: Mapping[str, Any] | None = None,
        *,
        require: bool = False,
        columns: list[str] | None = None,
    ) -> "Supermodel | None":
        return await cls.forge(query).fetch(require=require, columns=columns)

    @classmethod
    async def find_by_id(cls, id: Any, **options: Any) -> "Supermodel | None":
        return await cls.find_one({cls.id_attribute: id}, **options)

    @classmethod
    async def create(
        cls, data: Mapping[str, Any] | None = None, **options: Any
    ) -> "Supermodel":
        return await cls.forge(data).save(None, **options)

    @classmethod
    async def update(
        cls,
        data: Mapping[str, Any],
        *,
        id: Any,
        patch: bool = True,
        require: bool = True,
        method: SaveMethod | str | None = None,
    ) -> "Supermodel | None":
        """Load the row with ``id`` and save ``data`` onto it.

        Returns:
            The updated model, or None when the row is missing and
            require=False

        Raises:
            NotFoundError: If the row is missing and require=True
        """
        model = await cls.forge({cls.id_attribute: id}).fetch(require=require)
        if model is None:
            return None
        return await model.save(data, method=method, patch=patch, require=require)

    async def _destroy_by_id(cls, *, id: Any, require: bool = True) -> "Supermodel":
        """Delete the row with ``id``.

        Raises:
            NoRowsDeletedError: If no row was deleted and require=True
        """
        return await cls.forge({cls.id_attribute: id}).destroy(require=require)

    destroy = dualmethod(_destroy_by_id, Model.destroy)
    del _destroy_by_id

    @classmethod
    async def find_or_create(
        cls,
        data: Mapping[str, Any],
        *,
        defaults: Mapping[str, Any] | None = None,
        columns: list[str] | None = None,
        **options: Any,
    ) -> "Supermodel":
        """Return the first row matching ``data``, or insert one.

        ``defaults`` are only used for the insert; ``data`` wins over them.
        """
        model = await cls.find_one(data, columns=columns)
        if model is not None:
            return model
        return await cls.create({**(defaults or {}), **data}, **options)

    @classmethod
    async def upsert(
        cls,
        select_data: Mapping[str, Any],
        update_data: Mapping[str, Any],
        **options: Any,
    ) -> "Supermodel":
        """Patch the row matching ``select_data`` or insert the merged data."""
        model = await cls.find_one(select_data)
        if model is not None:
            options.update(patch=True, method=SaveMethod.UPDATE)
            return await model.save(update_data, **options)

        options["method"] = SaveMethod.INSERT
        return await cls.create({**select_data, **update_data}, **options)


def make_supermodel(adapter: PersistenceAdapter) -> type[Supermodel]:
    """Create a Supermodel base class bound to ``adapter``.

    Each call returns an independent base class, so several databases can be
    used side by side.

    Raises:
        ConfigurationError: If ``adapter`` is missing or not an adapter
    """
    if adapter is None:
        raise ConfigurationError("make_supermodel() requires a persistence adapter")
    if not isinstance(adapter, PersistenceAdapter):
        raise ConfigurationError(
            f"{type(adapter).__name__} does not implement PersistenceAdapter"
        )
    return type("Supermodel", (Supermodel,), {"adapter": adapter, "__module__": __name__})
