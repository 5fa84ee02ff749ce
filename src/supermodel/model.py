"""Model base class: instance state and the save lifecycle.

A Model instance holds:
- attributes: current field values, the only state that is ever persisted
- previous_attributes: the values last synchronised with storage
- staged values for write-only fields (never persisted, cleared after
  every save attempt)

save() assembles a PersistContext, runs the class's interceptor chain in
order, commits the pending attributes and hands the payload to the adapter.
If anything fails the attributes are restored to what they were before the
attempt.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from types import MethodType
from typing import Any, ClassVar

from supermodel.errors import (
    ConfigurationError,
    NoRowsDeletedError,
    NoRowsUpdatedError,
    NotFoundError,
    PersistenceError,
)
from supermodel.hooks.registry import Interceptor, InterceptorChain
from supermodel.hooks.service import InterceptorService
from supermodel.hooks.types import (
    PersistContext,
    SaveMethod,
    SaveOptions,
    compute_changes,
)
from supermodel.persistence.adapter import PersistenceAdapter

logger = logging.getLogger(__name__)

DEFAULT_TIMESTAMPS = ("createdAt", "updatedAt")


class WriteOnlyField:
    """A virtual field that can be set but never read or persisted.

    Reading returns None. Writing stages the value on the instance until
    the next save attempt consumes it.
    """

    def __init__(self, name: str | None = None):
        self.name = name

    def __set_name__(self, owner: type, name: str) -> None:
        if self.name is None:
            self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return None

    def __set__(self, instance: "Model", value: Any) -> None:
        instance._staged[self.name] = value


class dualmethod:
    """Bind ``on_class`` when looked up on the class, ``on_instance`` otherwise.

    Lets ``User.destroy(id=1)`` and ``user.destroy()`` share a name.
    """

    def __init__(self, on_class: Any, on_instance: Any):
        self.on_class = on_class
        self.on_instance = on_instance

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return MethodType(self.on_class, owner)
        return MethodType(self.on_instance, instance)


class Model:
    """Base class for persisted records.

    Class configuration:
        table_name: Table the model reads and writes
        id_attribute: Primary key attribute (default "id")
        has_timestamps: Pair of (created, updated) attribute names, True for
                        ("createdAt", "updatedAt"), or False
        adapter: PersistenceAdapter the model is bound to
    """

    table_name: ClassVar[str | None] = None
    id_attribute: ClassVar[str] = "id"
    has_timestamps: ClassVar[tuple[str, str] | bool] = DEFAULT_TIMESTAMPS
    adapter: ClassVar[PersistenceAdapter | None] = None

    interceptors: ClassVar[InterceptorChain] = InterceptorChain()
    virtuals: ClassVar[frozenset[str]] = frozenset()

    _interceptor_service: ClassVar[InterceptorService] = InterceptorService()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._collect_virtuals()

    @classmethod
    def _collect_virtuals(cls) -> None:
        names: set[str] = set()
        seen: set[str] = set()
        for klass in cls.__mro__:
            for attr_name, attr in vars(klass).items():
                if attr_name in seen:
                    continue
                seen.add(attr_name)
                if isinstance(attr, WriteOnlyField):
                    names.add(attr.name)
        cls.virtuals = frozenset(names)

    @classmethod
    def timestamp_attributes(cls) -> tuple[str, ...]:
        if cls.has_timestamps is True:
            return DEFAULT_TIMESTAMPS
        if not cls.has_timestamps:
            return ()
        created, updated = cls.has_timestamps
        return (created, updated)

    @classmethod
    def before_persist(cls, name: str):
        """Decorator appending an interceptor to this class's chain.

        Usage:
            @Account.before_persist("normalizeEmail")
            async def normalize_email(ctx):
                ...
        """

        def decorator(fn: Interceptor) -> Interceptor:
            cls.interceptors = cls.interceptors.append(name, fn)
            return fn

        return decorator

    @classmethod
    def _require_adapter(cls) -> PersistenceAdapter:
        if cls.adapter is None:
            raise ConfigurationError(
                f"{cls.__name__} is not bound to a persistence adapter"
            )
        if not cls.table_name:
            raise ConfigurationError(f"{cls.__name__} does not declare table_name")
        return cls.adapter

    # ------------------------------------------------------------------
    # Construction and attribute access
    # ------------------------------------------------------------------

    def __init__(self, attributes: Mapping[str, Any] | None = None, **kwargs: Any):
        self.attributes: dict[str, Any] = {}
        self.previous_attributes: dict[str, Any] = {}
        self._staged: dict[str, Any] = {}
        self.set({**(attributes or {}), **kwargs})

    @classmethod
    def forge(cls, attributes: Mapping[str, Any] | None = None) -> "Model":
        return cls(attributes)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Model":
        """Build an instance from a stored row, marked as synchronised."""
        model = cls(row)
        model.previous_attributes = dict(model.attributes)
        return model

    @property
    def id(self) -> Any:
        return self.attributes.get(self.id_attribute)

    @property
    def staged(self) -> dict[str, Any]:
        return dict(self._staged)

    def is_new(self) -> bool:
        """True while the record has no identifier."""
        return self.id is None

    def get(self, name: str, default: Any = None) -> Any:
        if name in self.virtuals:
            return None
        return self.attributes.get(name, default)

    def set(self, key: str | Mapping[str, Any], value: Any = None) -> "Model":
        """Set one attribute or a mapping of attributes.

        Names of write-only fields are staged instead of stored.
        """
        data = key if isinstance(key, Mapping) else {key: value}
        for name, item in data.items():
            if name in self.virtuals:
                self._staged[name] = item
            else:
                self.attributes[name] = item
        return self

    def unset(self, name: str) -> "Model":
        if name in self.virtuals:
            self._staged.pop(name, None)
        else:
            self.attributes.pop(name, None)
        return self

    def has(self, name: str) -> bool:
        return self.attributes.get(name) is not None

    def clear(self) -> "Model":
        self.attributes = {}
        return self

    @property
    def changed(self) -> dict[str, Any]:
        """Attributes that differ from the last synchronised state."""
        return compute_changes(self.attributes, self.previous_attributes) or {}

    def has_changed(self, name: str | None = None) -> bool:
        changes = self.changed
        return bool(changes) if name is None else name in changes

    def to_dict(self) -> dict[str, Any]:
        return dict(self.attributes)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id_attribute}={self.id!r}>"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def save(
        self,
        attributes: Mapping[str, Any] | None = None,
        *,
        method: SaveMethod | str | None = None,
        patch: bool = False,
        require: bool = True,
    ) -> "Model":
        """Persist the instance.

        Args:
            attributes: Values to set as part of this save; with patch=True
                        on an update they are the only values written
            method: Force "insert" or "update"; default decided by is_new()
            patch: Write only ``attributes`` (updates only)
            require: Fail when an update touches no row

        Returns:
            The instance

        Raises:
            SchemaValidationError, SaveAbortedError, PersistenceError, or
            anything an interceptor raises. The instance's attributes are
            left as they were; staged write-only values are cleared.
        """
        options = SaveOptions.build(method=method, patch=patch, require=require)
        adapter = self._require_adapter()

        payload: dict[str, Any] = {}
        for name, value in (attributes or {}).items():
            if name in self.virtuals:
                self._staged[name] = value
            else:
                payload[name] = value

        snapshot = dict(self.attributes)
        try:
            context = self._build_context(options, payload)
            logger.debug(
                "Saving %s (%s, patch=%s)",
                self.table_name,
                context.method.value,
                options.patch,
            )
            await self._interceptor_service.run(self.interceptors, context)
            self.attributes = context.pending
            self._write(adapter, context)
        except Exception:
            self.attributes = snapshot
            raise
        finally:
            self._staged.clear()

        self.previous_attributes = dict(self.attributes)
        return self

    def _build_context(self, options: SaveOptions, payload: dict[str, Any]) -> PersistContext:
        is_new = self.is_new()
        method = options.method or (SaveMethod.INSERT if is_new else SaveMethod.UPDATE)
        pending = {**self.attributes, **payload}

        if method is SaveMethod.UPDATE and options.patch:
            written = dict(payload)
        else:
            written = dict(pending)

        context = PersistContext(
            model=self,
            method=method,
            options=options,
            is_new=is_new,
            attributes=written,
            pending=pending,
            staged=dict(self._staged),
        )

        timestamps = self.timestamp_attributes()
        if timestamps:
            created, updated = timestamps
            now = datetime.now(UTC)
            if method is SaveMethod.INSERT and pending.get(created) is None:
                context.update({created: now})
            context.update({updated: now})

        return context

    def _write(self, adapter: PersistenceAdapter, context: PersistContext) -> None:
        if context.method is SaveMethod.INSERT:
            row = adapter.insert(self.table_name, self.id_attribute, context.attributes)
            self.attributes[self.id_attribute] = row[self.id_attribute]
            return

        if self.id is None:
            raise PersistenceError(
                f"Cannot update a '{self.table_name}' row without an {self.id_attribute}"
            )
        count = adapter.update(self.table_name, self.id_attribute, self.id, context.attributes)
        if count == 0 and context.options.require:
            raise NoRowsUpdatedError(self.table_name, self.id)

    async def fetch(
        self, *, require: bool = False, columns: list[str] | None = None
    ) -> "Model | None":
        """Load the first row matching the current attributes.

        Returns:
            The instance, refreshed from storage, or None when no row matches

        Raises:
            NotFoundError: If require=True and no row matches
        """
        adapter = self._require_adapter()
        query = dict(self.attributes)
        rows = adapter.select(self.table_name, query, columns=columns, limit=1)
        if not rows:
            if require:
                raise NotFoundError(self.table_name, query)
            return None

        self.attributes.update(rows[0])
        self.previous_attributes = dict(self.attributes)
        return self

    async def destroy(self, *, require: bool = True) -> "Model":
        """Delete the row and clear the instance.

        Raises:
            NoRowsDeletedError: If require=True and no row was deleted
        """
        adapter = self._require_adapter()
        if self.id is None:
            raise PersistenceError(
                f"Cannot destroy a '{self.table_name}' row without an {self.id_attribute}"
            )

        count = adapter.delete(self.table_name, self.id_attribute, self.id)
        if count == 0 and require:
            raise NoRowsDeletedError(self.table_name, self.id)

        self.attributes = {}
        self.previous_attributes = {}
        return self
