"""
Process-scope interception: last-resort handlers for failures outside requests.

Installed once during bootstrap by ``install_process_handlers``:

- Unobserved failures: an asyncio task or future failed and nobody retrieved
  the exception. Logged as critical, then the process keeps serving.
- Fatal faults: an exception escaped every scope synchronously. Logged as
  critical, then the process exits with status 1 and an external supervisor
  restarts it. In-process state is not trusted after such a fault. Hooked via
  ``sys.excepthook`` and ``threading.excepthook``, and via the loop exception
  handler for contexts without a future or task (a failing loop callback).

Both paths use the pipeline's blocking ``record_sync`` since neither can await.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import threading
import traceback
from collections.abc import Callable
from types import TracebackType
from typing import Any, Optional

from supreme_service_libs.error_handling.factories import (
    create_uncaught_exception,
    create_unhandled_task_failure,
)
from supreme_service_libs.logging_utils import create_service_logger
from supreme_service_libs.protocols import ErrorLogPipelineProtocol

FATAL_EXIT_CODE = 1

ExceptHook = Callable[[type[BaseException], BaseException, Optional[TracebackType]], Any]
ThreadExceptHook = Callable[[threading.ExceptHookArgs], Any]
LoopExceptionHandler = Callable[[asyncio.AbstractEventLoop, dict[str, Any]], object]

# Loop contexts carrying one of these keys come from an awaitable nobody retrieved.
_AWAITABLE_CONTEXT_KEYS = ("future", "task")

_installed: Optional[ProcessHandlers] = None


class ProcessHandlers:
    """The installed set of process-wide handlers."""

    def __init__(
        self,
        pipeline: ErrorLogPipelineProtocol,
        exit_func: Callable[[int], Any],
        logger: Optional[Any] = None,
    ) -> None:
        self._pipeline = pipeline
        self._exit_func = exit_func
        self._logger = logger or create_service_logger("process_handlers")
        self._previous_excepthook: Optional[ExceptHook] = None
        self._previous_thread_excepthook: Optional[ThreadExceptHook] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous_loop_handler: Optional[LoopExceptionHandler] = None

    @property
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        return self._loop

    def handle_loop_exception(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        """asyncio exception handler.

        An exception raised by a plain loop callback escaped synchronously and
        is fatal. Everything else (unretrieved task or future exceptions,
        exception-less reports) is recorded and the loop keeps running.
        """
        exception = context.get("exception")
        if exception is not None and not any(
            key in context for key in _AWAITABLE_CONTEXT_KEYS
        ):
            self.handle_fatal_fault(type(exception), exception, exception.__traceback__)
            return

        message = context.get("message") or "Unhandled task failure"
        error = create_unhandled_task_failure(exception, message=message)
        self._pipeline.record_sync(error)

    def handle_fatal_fault(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: Optional[TracebackType],
    ) -> None:
        """sys.excepthook: record, then terminate with a non-zero status."""
        if issubclass(exc_type, KeyboardInterrupt):
            hook = self._previous_excepthook or sys.__excepthook__
            hook(exc_type, exc, tb)
            return

        cause_stack = "".join(traceback.format_exception(exc_type, exc, tb))
        error = create_uncaught_exception(cause_stack=cause_stack)
        self._pipeline.record_sync(error)

        for handler in logging.getLogger().handlers:
            handler.flush()
        self._exit_func(FATAL_EXIT_CODE)

    def handle_thread_fault(self, args: threading.ExceptHookArgs) -> None:
        """threading.excepthook: a thread died with an exception."""
        if args.exc_value is None or issubclass(args.exc_type, SystemExit):
            hook = self._previous_thread_excepthook or threading.__excepthook__
            hook(args)
            return
        self.handle_fatal_fault(args.exc_type, args.exc_value, args.exc_traceback)

    def attach_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Route the loop's unhandled exceptions to this instance."""
        if self._loop is loop:
            return
        self._detach_loop()
        self._previous_loop_handler = loop.get_exception_handler()
        loop.set_exception_handler(self.handle_loop_exception)
        self._loop = loop

    def _detach_loop(self) -> None:
        if self._loop is not None and not self._loop.is_closed():
            self._loop.set_exception_handler(self._previous_loop_handler)
        self._loop = None
        self._previous_loop_handler = None

    def uninstall(self) -> None:
        """Restore the hooks that were in place before installation."""
        global _installed
        if sys.excepthook == self.handle_fatal_fault:
            sys.excepthook = self._previous_excepthook or sys.__excepthook__
        if threading.excepthook == self.handle_thread_fault:
            threading.excepthook = self._previous_thread_excepthook or threading.__excepthook__
        self._detach_loop()
        if _installed is self:
            _installed = None


def install_process_handlers(
    pipeline: ErrorLogPipelineProtocol,
    *,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    exit_func: Callable[[int], Any] = os._exit,
) -> ProcessHandlers:
    """
    Install the process-wide failure handlers. Call exactly once at bootstrap.

    Args:
        pipeline: Logging pipeline receiving process-scope failures
        loop: Event loop to watch; defaults to the running loop, if any.
            Without one, call ``ProcessHandlers.attach_loop`` later.
        exit_func: Terminates the process after a fatal fault

    Returns:
        The installed handlers

    Raises:
        RuntimeError: If handlers are already installed
    """
    global _installed
    if _installed is not None:
        raise RuntimeError("Process handlers are already installed")

    handlers = ProcessHandlers(pipeline, exit_func)
    handlers._previous_excepthook = sys.excepthook
    sys.excepthook = handlers.handle_fatal_fault
    handlers._previous_thread_excepthook = threading.excepthook
    threading.excepthook = handlers.handle_thread_fault

    if loop is None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
    if loop is not None:
        handlers.attach_loop(loop)

    _installed = handlers
    handlers._logger.info(
        "Process-scope error handlers installed", loop_attached=loop is not None
    )
    return handlers
