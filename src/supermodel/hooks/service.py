"""Interceptor execution for the save lifecycle.

Interceptors run sequentially in chain order. Each interceptor's update
output is merged into the context before the next one runs. An abort result
or a raised exception stops the chain and fails the save.
"""

import logging

from supermodel.errors import SaveAbortedError
from supermodel.hooks.registry import InterceptorChain
from supermodel.hooks.types import PersistContext

logger = logging.getLogger(__name__)


class InterceptorService:
    """Runs an interceptor chain against a PersistContext."""

    async def run(self, chain: InterceptorChain, context: PersistContext) -> None:
        """Execute every interceptor in ``chain``.

        Raises:
            SaveAbortedError: If an interceptor returns an abort result
            Exception: Whatever an interceptor raises, unchanged
        """
        for name, interceptor in chain:
            logger.debug(
                "Running interceptor '%s' for %s %s",
                name,
                context.method.value,
                context.table_name,
            )
            try:
                result = await interceptor(context)
            except Exception as e:
                logger.warning(
                    "Interceptor '%s' failed on '%s': %s", name, context.table_name, e
                )
                raise

            if result is None:
                continue

            if result.abort:
                logger.warning(
                    "Interceptor '%s' aborted save on '%s': %s",
                    name,
                    context.table_name,
                    result.abort,
                )
                raise SaveAbortedError(name, result.abort)

            if result.update:
                context.update(result.update)
