import inspect
import traceback
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from roocode_generator.core.exceptions import RooCodeError
from roocode_generator.utils.logging import get_logger

logger = get_logger("core.error_handler")


def handle_error(
    error: BaseException | None = None,
    *,
    context: str | None = None,
    verbose: bool = False,
    error_str: str | None = None,
) -> None:
    """Central error handler for the application.

    Args:
        error: The exception instance to handle (can be None if error_str is provided).
        context: Optional string describing where the error occurred.
        verbose: If True, log detailed traceback for debugging.
        error_str: Optional error message string if no exception object is available.
    """
    ctx = f"[{context}]" if context else ""

    if error is None:
        logger.critical(f"{ctx} {error_str or 'An unknown error occurred'}".strip())
        return

    if isinstance(error, RooCodeError):
        # Provider errors carry a code that tells the user what to fix
        code = getattr(error, "code", None)
        suffix = f" (code: {code})" if code else ""
        logger.error(f"{ctx} {error}{suffix}".strip())
    else:
        error_msg = str(error) or "No error message provided"
        logger.critical(
            f"{ctx} Unexpected error: {type(error).__name__}: {error_msg}".strip()
        )

    if verbose:
        trace = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        logger.debug(f"Traceback:\n{trace}")


T = TypeVar("T")
P = ParamSpec("P")


def safe_entrypoint(context: str) -> Callable[[Callable[P, T]], Callable[P, T | None]]:
    """Wrap a CLI entrypoint with unified error handling.

    Typer/click ``Exit`` and ``Abort`` propagate untouched so exit codes survive.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T | None]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T | None:
            verbose = bool(kwargs.get("verbose", False))
            try:
                return func(*args, **kwargs)
            except Exception as err:
                if "Exit" in type(err).__name__ or "Abort" in type(err).__name__:
                    raise
                handle_error(err, context=context, verbose=verbose)
                return None

        wrapper.__signature__ = inspect.signature(func)  # type: ignore[attr-defined]
        return wrapper

    return decorator
