"""Command dispatch for async routes.

Handlers deliver email synchronously, so commands run in the worker
threadpool instead of on the event loop.
"""

from fastapi.concurrency import run_in_threadpool
from protean.utils.globals import current_domain


async def dispatch(command):
    """Process ``command`` synchronously off the event loop and return the handler's result."""
    return await run_in_threadpool(current_domain.process, command, asynchronous=False)
