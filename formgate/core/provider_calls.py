"""Guarded calls into external providers.

Every provider lookup goes through ``call_provider`` so that timeouts and
provider faults surface as a single exception type the domain code absorbs.
The call itself is made inside the guard, so a provider that raises before
returning an awaitable is handled the same as one that fails while awaited.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from formgate.core.exceptions import ProviderUnavailableError

T = TypeVar("T")


async def call_provider(
    call: Callable[[], Awaitable[T]], *, provider: str, timeout: Optional[float] = None
) -> T:
    """Invoke and await a provider call, converting any failure into ProviderUnavailableError.

    Args:
        call: Zero-argument callable starting the provider call,
            e.g. ``lambda: provider.is_member(user_id, groups)``.
        provider: Collaborator name used in the error.
        timeout: Seconds to wait; None waits for the provider's own contract.

    Raises:
        ProviderUnavailableError: The call raised or timed out.
    """
    try:
        awaitable = call()
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ProviderUnavailableError(provider, f"timed out after {timeout}s") from e
    except asyncio.CancelledError:
        raise
    except Exception as e:
        raise ProviderUnavailableError(provider, str(e) or type(e).__name__) from e
