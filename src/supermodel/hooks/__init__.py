"""Supermodel pre-persist interceptor system.

Interceptors run after a model has assembled the attributes it is about to
write and before the persistence adapter writes them. They can rewrite the
pending attributes or abort the save.

Usage:
    from supermodel.hooks import InterceptResult, PersistContext

    @Account.before_persist("normalizeEmail")
    async def normalize_email(ctx: PersistContext) -> InterceptResult | None:
        if "email" in ctx.attributes:
            return InterceptResult(update={"email": ctx.attributes["email"].lower()})
        return None
"""

from supermodel.hooks.registry import Interceptor, InterceptorChain
from supermodel.hooks.service import InterceptorService
from supermodel.hooks.types import (
    InterceptResult,
    PersistContext,
    SaveMethod,
    SaveOptions,
    compute_changes,
)

__all__ = [
    "InterceptResult",
    "Interceptor",
    "InterceptorChain",
    "InterceptorService",
    "PersistContext",
    "SaveMethod",
    "SaveOptions",
    "compute_changes",
]
