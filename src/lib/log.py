"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the verbosity of the object currently connected to the
logging context (normally the Compiler doing the rendering) without
requiring explicit state passing.

fixincludes is a library: importing it leaves loguru's sinks alone and its
messages are disabled until the application opts in:

    from fixincludes.lib.log import log_enable
    log_enable()                      # stderr, project format

Usage inside the package:

    token = state_connectToLogger(compiler)
    LOG("Debug details appear if verbosity >= 2", level=2)
    state_disconnectFromLogger(token)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold the object whose verbosity gates LOG()
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

PACKAGE = __name__.split('.')[0]

logger.disable(PACKAGE)


def log_enable(sink: Any = sys.stderr, level: str = "DEBUG", **kwargs: Any) -> int:
    """
    Turn on fixincludes messages and send them to a sink.

    Args:
        sink: Any loguru sink (stream, path, callable)
        level: Minimum loguru level for the sink
        **kwargs: Passed to logger.add()

    Returns:
        The loguru handler id, for logger.remove()
    """
    logger.enable(PACKAGE)
    kwargs.setdefault("format", logger_format)
    return logger.add(sink, level=level, **kwargs)


def state_connectToLogger(state: Any) -> Any:
    """
    Connect a state object to the logging context.

    Any object with a ``verbosity`` attribute works. Returns the
    ContextVar token for state_disconnectFromLogger().

    Args:
        state: Object with a verbosity attribute (e.g. a Compiler)
    """
    return _program_state.set(state)


def state_disconnectFromLogger(token: Any) -> None:
    """Restore the logging context that was active before a connect."""
    _program_state.reset(token)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=trace)
        **kwargs: Additional loguru metadata
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
