"""
Diagnostics for skilldown, on Loguru.

Two channels:

    LOG(message, level)   progress trace, shown when the verbosity of the
                          ProgramState running in this context is >= level
    WARN(message)         advisory diagnostics (unresolved references,
                          broken links, missing data files); always shown

The active ProgramState is held in a context variable, so library code can
log without being handed the state. Outside a pipeline run (e.g. when the
post-processor is used as a library) LOG is silent and WARN still reports.

Usage:
    state_connectToLogger(state)
    LOG("Building skill atlas-search...", level=1)
    WARN("Unresolved name reference: pipe.$search")
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

_program_state: ContextVar[Optional[Any]] = ContextVar("program_state", default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{module}.{function}</cyan>:<cyan>{line}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make ``state`` the source of verbosity for LOG() in this context.

    Args:
        state: ProgramState (anything with a ``verbosity`` attribute)
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Trace message, gated by the connected state's verbosity.

    Args:
        message: Text to log
        level: 1 = normal, 2 = verbose (-v), 3 = debug (-vv)
        **kwargs: Passed through to loguru
    """
    state = _program_state.get()
    if state is None or getattr(state, "verbosity", 0) < level:
        return
    logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str) -> None:
    """Advisory diagnostic; never gated and never raises"""
    logger.opt(depth=1).warning(message)
