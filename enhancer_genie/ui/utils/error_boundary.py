"""
Error boundary for GUI event handlers.

Flet swallows exceptions raised inside event handlers and leaves the page
half-updated. Handlers wrapped with ``with_error_boundary`` log the error and
report it in the status bar instead.
"""
import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def with_error_boundary(
    fallback_value: Any = None,
    fallback_ui_message: Optional[str] = None,
    log_level: str = "error"
) -> Callable:
    """Decorator to add an error boundary to UI methods.

    Args:
        fallback_value: Value to return on error
        fallback_ui_message: Message to show the user on error
        log_level: Logging level ('error', 'warning', 'debug')

    Example:
        @with_error_boundary(fallback_ui_message="Could not change tissue")
        def on_tissue_changed(self, e):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log_func = getattr(logger, log_level, logger.error)
                log_func(f"Error in {func.__name__}: {e}", exc_info=log_level == "error")

                if fallback_ui_message:
                    owner = args[0] if args else None
                    status_manager = getattr(owner, "status_manager", None)
                    if status_manager is None:
                        status_manager = getattr(getattr(owner, "gui", None), "status_manager", None)
                    if status_manager is not None:
                        status_manager.update_status(f"⚠️ {fallback_ui_message}", "orange")

                return fallback_value

        return wrapper
    return decorator
