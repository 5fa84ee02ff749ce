"""Ordered interceptor chains.

Each model class owns one InterceptorChain. Chains are immutable: adding an
interceptor returns a new chain, so a subclass never changes the chain of
the class it derives from.
"""

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass

from supermodel.hooks.types import InterceptResult, PersistContext

# Interceptor signature: async (PersistContext) -> InterceptResult | None
Interceptor = Callable[[PersistContext], Awaitable[InterceptResult | None]]


@dataclass(frozen=True)
class InterceptorChain:
    """Named interceptors, run in insertion order before every write.

    Example:
        chain = InterceptorChain().append("hashPassword", hash_password)
        chain = chain.append("validateSave", validate_pending)
        chain.names()  # ["hashPassword", "validateSave"]
    """

    entries: tuple[tuple[str, Interceptor], ...] = ()

    def append(self, name: str, interceptor: Interceptor) -> "InterceptorChain":
        """Return a chain with ``interceptor`` added at the end.

        Idempotent: appending a name already in the chain is a no-op.
        """
        if name in self:
            return self
        return InterceptorChain(entries=self.entries + ((name, interceptor),))

    def get(self, name: str) -> Interceptor:
        """Get an interceptor by name.

        Raises:
            ValueError: If no interceptor with that name is in the chain
        """
        for entry_name, interceptor in self.entries:
            if entry_name == name:
                return interceptor
        raise ValueError(f"Interceptor '{name}' is not registered")

    def names(self) -> list[str]:
        return [name for name, _ in self.entries]

    def __contains__(self, name: object) -> bool:
        return any(entry_name == name for entry_name, _ in self.entries)

    def __iter__(self) -> Iterator[tuple[str, Interceptor]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
