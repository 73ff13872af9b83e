"""
Loading climate actions from the read endpoint.

``load_actions()`` is the failure boundary of the pipeline: whatever goes
wrong while fetching, decoding or validating a payload, the caller gets one
``DataUnavailableError`` with a human-readable message. The underlying error
is logged and chained as ``__cause__`` but never put into the message.

Each call makes exactly one attempt. Retrying is an explicit user action
(a refresh control), never a silent loop here. Every HTTP request carries a
timeout so a slow source resolves to a failure instead of hanging.

Usage::

    loader = ActionLoader.from_env()
    try:
        actions = loader.load()
    except DataUnavailableError as exc:
        show_error(str(exc))
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import requests

from actions.schema import Action, ActionValidationError, Status, validate_actions
from actions.sorting import sort_actions
from utils.config import ClientConfig
from utils.http import SessionManager, get_json, post_json

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = (
    "Failed to load climate actions data. "
    "Please check the data source configuration and try again."
)
UPDATE_FAILED_MESSAGE = "Failed to update action status. Please try again."


class DataUnavailableError(RuntimeError):
    """The action data could not be loaded (transport, decode or validation)."""


class StatusUpdateError(RuntimeError):
    """A status update was not acknowledged by the server."""


def load_actions(fetch: Callable[[], Any]) -> list[Action]:
    """Fetch a raw payload with *fetch*, validate it and return it sorted.

    Args:
        fetch: Zero-argument callable returning the decoded JSON payload.

    Raises:
        DataUnavailableError: on any fetch, decode or validation failure.
    """
    try:
        payload = fetch()
        actions = validate_actions(payload)
    except ActionValidationError as exc:
        logger.error("actions payload failed validation: %s", exc)
        raise DataUnavailableError(LOAD_FAILED_MESSAGE) from exc
    except (requests.RequestException, ValueError, OSError) as exc:
        logger.error("actions payload could not be fetched: %s", exc)
        raise DataUnavailableError(LOAD_FAILED_MESSAGE) from exc
    logger.info("loaded %d actions", len(actions))
    return sort_actions(actions)


class ActionLoader:
    """HTTP client for the actions API (read and status-update endpoints)."""

    def __init__(self, base_url: str, timeout: float = 15.0,
                 session_manager: SessionManager | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._sessions = session_manager or SessionManager()

    @classmethod
    def from_env(cls) -> "ActionLoader":
        """Build a loader from ``ACTIONS_API_URL`` and ``HTTP_TIMEOUT``."""
        cfg = ClientConfig.from_env()
        return cls(cfg.base_url, timeout=cfg.timeout)

    @property
    def actions_url(self) -> str:
        return f"{self.base_url}/api/actions"

    @property
    def update_url(self) -> str:
        return f"{self.base_url}/api/update-status"

    def fetch(self) -> Any:
        """GET the raw payload from the read endpoint."""
        return get_json(self._sessions.session, self.actions_url, self.timeout)

    def load(self) -> list[Action]:
        """Return validated, sorted actions.

        Raises:
            DataUnavailableError: the endpoint failed or returned invalid data.
        """
        return load_actions(self.fetch)

    def update_status(self, action_id: str, new_status: Status | str) -> str:
        """Ask the server to move *action_id* to *new_status*.

        The change is not reflected locally; reload to see it in KPIs and
        sort order.

        Returns:
            The server's acknowledgement message.

        Raises:
            StatusUpdateError: the request failed or was not acknowledged.
        """
        status = Status(new_status)
        payload = {"actionId": action_id, "newStatus": status.value}
        try:
            result = post_json(self._sessions.session, self.update_url, payload,
                               self.timeout)
        except (requests.RequestException, ValueError) as exc:
            logger.error("status update for %s failed: %s", action_id, exc)
            raise StatusUpdateError(UPDATE_FAILED_MESSAGE) from exc
        if not isinstance(result, dict) or not result.get("success"):
            logger.error("status update for %s not acknowledged: %r", action_id, result)
            raise StatusUpdateError(UPDATE_FAILED_MESSAGE)
        message = result.get("message", "")
        logger.info("status updated for %s: %s", action_id, message)
        return message

    def close(self) -> None:
        self._sessions.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
