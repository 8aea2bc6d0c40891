# =============================================================================
# MIPARQUEO BACKEND - INITIALIZATION GATE
# =============================================================================
# File: db/gate.py
# Description: Lazy, single-flight construction of the Database with a
#              bounded wait for concurrent callers
# =============================================================================

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

from miparqueo.core.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    InitTimeoutError,
)
from miparqueo.db.database import Database


logger = logging.getLogger(__name__)

DEFAULT_INIT_TIMEOUT = 5.0


class GateState(str, Enum):
    """Lifecycle of the published Database."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


@dataclass
class InitAttempt:
    """
    One construction attempt.

    ``done`` is set exactly once, after ``database`` or ``error`` has been
    filled in, which wakes every waiter at the same moment.
    """
    done: asyncio.Event = field(default_factory=asyncio.Event)
    database: Optional[Database] = None
    error: Optional[BaseException] = None

    def outcome(self) -> Database:
        if self.error is not None:
            raise self.error
        assert self.database is not None
        return self.database


class InitializationGate:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    INITIALIZATION GATE                                   │
    │  Builds the Database at most once, however many requests race for it    │
    │  Waiters block on an event, bounded by a deadline                       │
    └─────────────────────────────────────────────────────────────────────────┘

    State machine:
        UNINITIALIZED ──get()──▶ INITIALIZING ──ok──▶ READY
              ▲                        │
              └──── FAILED ◀──error────┘      (FAILED retries on next get())

    A ConfigurationError is the exception: retrying cannot fix it, so the
    gate stays FAILED and re-raises it until close() resets the gate.

    Rules:
        - READY: ``get()`` returns the published Database immediately
        - FAILED by ConfigurationError: the same error is raised again and
          the initializer is not re-run
        - UNINITIALIZED / FAILED: the caller claims the transition and a
          background task runs the initializer; the caller awaits it
        - INITIALIZING: the caller waits for the running attempt, for at
          most ``timeout`` seconds, then gets ``InitTimeoutError``; the
          attempt itself is untouched
        - Every caller attached to an attempt sees the same Database or
          the same exception

    The state check and the claim happen with no ``await`` in between,
    which makes them atomic on the event loop.

    Usage:
        gate = InitializationGate(database_initializer(settings), timeout=5.0)
        db = await gate.get()
        rows = await db.query("SELECT * FROM parking_lots")
    """

    def __init__(
        self,
        initializer: Callable[[], Awaitable[Database]],
        timeout: float = DEFAULT_INIT_TIMEOUT,
    ):
        """
        Args:
            initializer: Zero-argument coroutine function that builds a
                ready Database (connect + schema)
            timeout: Seconds a waiter stays on an in-flight attempt
        """
        self._initializer = initializer
        self._timeout = timeout
        self._state = GateState.UNINITIALIZED
        self._database: Optional[Database] = None
        self._attempt: Optional[InitAttempt] = None
        self._task: Optional["asyncio.Task[None]"] = None
        self._last_error: Optional[BaseException] = None

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    async def get(self) -> Database:
        """
        Return the ready Database, building it or waiting for it as needed.

        Raises:
            ConfigurationError: Connection parameters missing or malformed
            DatabaseConnectionError: Backend unreachable (SchemaError included)
            InitTimeoutError: Waited longer than ``timeout`` on another
                caller's attempt
        """
        if self._state is GateState.READY and self._database is not None:
            return self._database

        if self._state is GateState.INITIALIZING and self._attempt is not None:
            return await self._wait(self._attempt)

        if self._state is GateState.FAILED and isinstance(self._last_error, ConfigurationError):
            raise self._last_error

        attempt = self._begin()
        await attempt.done.wait()
        return attempt.outcome()

    async def close(self) -> None:
        """
        Dispose of the published Database and return to UNINITIALIZED.

        An attempt still running is cancelled; its callers get a
        ``DatabaseConnectionError``.
        """
        attempt = self._attempt
        if self._task is not None and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

        # A task cancelled before its first step never reaches _run's finally
        if attempt is not None and not attempt.done.is_set():
            attempt.error = DatabaseConnectionError(
                message="Database initialization was cancelled"
            )
            attempt.done.set()

        if self._database is not None:
            await self._database.close()
            logger.info("Database connections closed")

        self._database = None
        self._attempt = None
        self._task = None
        self._last_error = None
        self._state = GateState.UNINITIALIZED

    # -------------------------------------------------------------------------
    # PROPERTIES
    # -------------------------------------------------------------------------

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is GateState.READY

    @property
    def database(self) -> Optional[Database]:
        """The published Database, or None when not READY."""
        return self._database

    @property
    def last_error(self) -> Optional[BaseException]:
        """Error of the most recent failed attempt."""
        return self._last_error

    @property
    def timeout(self) -> float:
        return self._timeout

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _begin(self) -> InitAttempt:
        """Claim INITIALIZING and start the attempt. Must not await."""
        attempt = InitAttempt()
        self._attempt = attempt
        self._state = GateState.INITIALIZING
        self._task = asyncio.ensure_future(self._run(attempt))
        return attempt

    async def _run(self, attempt: InitAttempt) -> None:
        logger.info("Initializing database...")
        try:
            database = await self._initializer()
        except asyncio.CancelledError:
            attempt.error = DatabaseConnectionError(
                message="Database initialization was cancelled"
            )
            self._state = GateState.UNINITIALIZED
            raise
        except Exception as e:
            attempt.error = e
            self._last_error = e
            self._state = GateState.FAILED
            logger.error(f"Error initializing database: {e}")
        else:
            attempt.database = database
            self._database = database
            self._last_error = None
            self._state = GateState.READY
            logger.info("Database initialized successfully")
        finally:
            attempt.done.set()

    async def _wait(self, attempt: InitAttempt) -> Database:
        try:
            await asyncio.wait_for(attempt.done.wait(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Gave up waiting for database initialization after {self._timeout}s"
            )
            raise InitTimeoutError(self._timeout) from None
        return attempt.outcome()
