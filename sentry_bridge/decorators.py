"""
Error Capture Decorators

Reports exceptions from code that runs outside a request, such as
background tasks and scheduled jobs.
"""

import functools
from typing import Any, Callable, Dict, Optional, TypeVar, cast

from .config import DEFAULT_CLIENT_KEY
from .sentry.registry import ClientProvider

F = TypeVar("F", bound=Callable[..., Any])


def capture_errors(
    clients: ClientProvider,
    client_key: str = DEFAULT_CLIENT_KEY,
    reraise: bool = True,
    tags: Optional[Dict[str, str]] = None,
) -> Callable[[F], F]:
    """
    Decorator to capture exceptions and send to Sentry.

    Args:
        clients: Registry or component providing the client
        client_key: Configuration key of the client
        reraise: Whether to reraise the exception after capture
        tags: Additional tags to include

    Usage:
        @capture_errors(tracking, tags={"job": "nightly_export"})
        def export_orders():
            ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)

            except Exception as e:
                error_tags = {"function": func.__name__}
                if tags:
                    error_tags.update(tags)

                clients.get_client(client_key).capture_exception(e, tags=error_tags)

                if reraise:
                    raise

                return None

        return cast(F, wrapper)

    return decorator
