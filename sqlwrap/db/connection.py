"""
Lazy connection handling for sqlwrap.

This file defines:
- Connector: owns one backend + its connection record and opens the raw
  driver handle on first use.

Backends must expose (see backend_base):
    backend.connect() -> raw connection
    backend.close(conn)
    backend.driver_errors
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .backend_base import BackendLike, ensure_backend

logger = logging.getLogger(__name__)


class Connector:
    """
    Lazily-connected owner of a single raw DB-API connection.

    Responsibilities:
        - Open the handle exactly once, on first use
        - Hand the live handle to the executor
        - Release it on disconnect(); the next use reconnects

    Notes:
        - Not thread-safe: use one Connector per thread
        - Safe to disconnect() multiple times, or before ever connecting
    """

    def __init__(self, backend: BackendLike):
        self.backend = ensure_backend(backend)
        self._handle: Optional[Any] = None

    @property
    def config(self) -> Any:
        return self.backend.config

    @property
    def is_connected(self) -> bool:
        return self._handle is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> None:
        """
        Open the connection unless it is already open.

        Raises DBConnectionError if the driver rejects the attempt.
        """
        if self._handle is not None:
            return
        self._handle = self.backend.connect()
        logger.info("Connected via %s", type(self.backend).__name__)

    def disconnect(self) -> None:
        """
        Close the connection and forget the handle.
        """
        if self._handle is None:
            return
        try:
            self.backend.close(self._handle)
        except self.backend.driver_errors as e:
            logger.warning("Error while closing connection: %s", e)
        finally:
            self._handle = None
        logger.info("Disconnected from %s", type(self.backend).__name__)

    def get_handle(self) -> Any:
        """
        Return the live raw connection, connecting first if needed.
        """
        self.connect()
        return self._handle
