"""
Shared thread pool for network calls issued from the GUI.

Flet runs event handlers on worker threads; long requests (uploads can
take minutes) are pushed to this pool so the handler returns at once and
the completion is delivered through the returned Future.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from functools import wraps
from typing import Callable, Optional

logger = logging.getLogger(__name__)

_thread_pool: Optional[ThreadPoolExecutor] = None
_pool_lock = threading.Lock()


def get_thread_pool() -> ThreadPoolExecutor:
    """Get or create the shared thread pool."""
    global _thread_pool

    if _thread_pool is None:
        with _pool_lock:
            if _thread_pool is None:
                _thread_pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="genie_worker")
                logger.info("Initialized thread pool with 4 workers")

    return _thread_pool


def shutdown_thread_pool(wait: bool = True) -> None:
    """Shutdown the thread pool gracefully."""
    global _thread_pool

    if _thread_pool is not None:
        with _pool_lock:
            if _thread_pool is not None:
                logger.info("Shutting down thread pool...")
                _thread_pool.shutdown(wait=wait)
                _thread_pool = None


def run_in_background(func: Callable, *args, on_complete: Optional[Callable[[Future], None]] = None, **kwargs) -> Future:
    """Run ``func`` on the pool; ``on_complete`` receives the finished Future."""
    @wraps(func)
    def wrapped():
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.debug(f"Background task {func.__name__} raised {type(e).__name__}: {e}")
            raise

    future = get_thread_pool().submit(wrapped)
    if on_complete:
        future.add_done_callback(on_complete)
    return future
