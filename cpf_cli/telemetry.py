"""Opt-in anonymous usage telemetry.

The only persisted state is a boolean flag in ``<config_dir>/telemetry.json``,
created disabled on first use. Events go to a PostHog capture endpoint and
carry the command name, outcome, platform and tool version. CPF values and
command arguments are never sent.
"""

from __future__ import annotations

import json
import logging
import platform
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from cpf_cli.config import Config
from cpf_cli.utils import TelemetryError, ensure_dir, read_json, write_json

logger = logging.getLogger(__name__)

EVENT_NAME = "cli_command"


class TelemetryState(BaseModel):
    enabled: bool = False


class TelemetryClient:
    """Owns the telemetry flag and sends command events when allowed."""

    def __init__(self, config: Config, version: str) -> None:
        self.config = config
        self.version = version
        self.path = config.telemetry_path
        self.state = self._load()

    def _load(self) -> TelemetryState:
        """Load the persisted flag, writing a disabled default if missing or unreadable."""
        try:
            return TelemetryState.model_validate(read_json(self.path))
        except FileNotFoundError:
            pass
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable telemetry config %s: %s", self.path, exc)

        state = TelemetryState()
        self._save(state)
        return state

    def _save(self, state: TelemetryState) -> None:
        try:
            ensure_dir(self.path.parent)
            write_json(state.model_dump(), self.path)
        except OSError as exc:
            raise TelemetryError(f"failed to save telemetry config: {exc}") from exc

    def set_enabled(self, enabled: bool) -> None:
        state = TelemetryState(enabled=enabled)
        self._save(state)
        self.state = state

    @property
    def is_enabled(self) -> bool:
        """Telemetry only runs when opted in and a project key is configured."""
        return self.state.enabled and bool(self.config.posthog_api_key)

    def build_event(self, command: str, success: bool, error: str | None = None) -> dict[str, Any]:
        os_name = platform.system().lower()
        arch = platform.machine().lower()
        timestamp = datetime.now(timezone.utc).isoformat()

        properties: dict[str, Any] = {
            "command": command,
            "success": success,
            "os": os_name,
            "arch": arch,
            "version": self.version,
            "timestamp": timestamp,
        }
        if error:
            properties["error"] = error

        return {
            "api_key": self.config.posthog_api_key,
            "event": EVENT_NAME,
            "distinct_id": f"{os_name}-{arch}",
            "properties": properties,
            "timestamp": timestamp,
        }

    def track(self, command: str, success: bool, error: str | None = None) -> bool:
        """Send a command event. Returns True if the collector accepted it.

        Network failures are logged and never reach the caller.
        """
        if not self.is_enabled:
            return False

        event = self.build_event(command, success, error)
        try:
            resp = httpx.post(
                self.config.posthog_endpoint,
                json=event,
                timeout=self.config.telemetry_timeout,
            )
            resp.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as exc:
            logger.debug("Telemetry event for %s not sent: %s", command, exc)
            return False
        return True
