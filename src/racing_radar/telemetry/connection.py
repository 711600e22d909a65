"""LiveTelemetryConnection — iRacing shared memory → raw telemetry samples."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from racing_radar.telemetry.models import ConnectionStatus

_logger = logging.getLogger(__name__)

# Telemetry variables copied into each raw sample.
TELEMETRY_KEYS: tuple[str, ...] = (
    "PlayerCarIdx",
    "PlayerCarPosition",
    "CarIdxLapDistPct",
    "CarIdxTrackSurface",
    "CarIdxPosition",
    "CarIdxLap",
    "CarLeftRight",
    "LapDistPct",
    "Speed",
    "RPM",
    "Gear",
    "Throttle",
    "Brake",
    "Clutch",
    "SteeringWheelAngle",
    "LapBestLapTime",
    "LapLastLapTime",
    "LapDeltaToBestLap",
    "LapCurrentLapTime",
    "FuelLevel",
    "FuelUsePerHour",
)

SESSION_KEYS: tuple[str, ...] = ("WeekendInfo", "SessionInfo", "DriverInfo")


class LiveTelemetryConnection:
    """Manages the connection to the iRacing shared-memory SDK.

    Parameters
    ----------
    sdk:
        An iRacing SDK instance (``irsdk.IRSDK()``). Injected for testability;
        defaults to the real SDK when not provided.
    """

    def __init__(self, sdk: Any | None = None) -> None:
        if sdk is None:
            import irsdk  # lazy import, irsdk is only needed at runtime

            sdk = irsdk.IRSDK()
        self._sdk = sdk
        self._connected: bool = False
        self._connecting: bool = False
        self._callbacks: list[Callable[[bool], None]] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        """True when the SDK has successfully connected to iRacing."""
        return self._connected

    @property
    def status(self) -> ConnectionStatus:
        """Connection state for the UI.

        ``WAITING`` means the SDK is up but iRacing is not in a session yet.
        """
        if self._connecting:
            return ConnectionStatus.CONNECTING
        if not self._connected:
            return ConnectionStatus.DISCONNECTED
        if not getattr(self._sdk, "is_connected", True):
            return ConnectionStatus.WAITING
        return ConnectionStatus.CONNECTED

    def connect(self) -> bool:
        """Attempt to connect to iRacing.

        Returns
        -------
        bool
            True if iRacing is running and the connection succeeded.
            False otherwise (never raises).
        """
        self._connecting = True
        try:
            initialized = bool(self._sdk.startup())
        except Exception as exc:
            _logger.debug("iRacing SDK startup failed: %s", exc)
            initialized = False
        finally:
            self._connecting = False

        if initialized != self._connected:
            self._connected = initialized
            _logger.info("iRacing %s", "connected" if initialized else "disconnected")
            self._fire_callbacks(initialized)

        return self._connected

    def disconnect(self) -> None:
        """Disconnect from iRacing and notify callbacks."""
        self._sdk.shutdown()
        if self._connected:
            self._connected = False
            _logger.info("iRacing disconnected")
            self._fire_callbacks(False)

    def register_callback(self, callback: Callable[[bool], None]) -> None:
        """Register *callback* to be called whenever connection state changes.

        The callback receives a single bool argument: True = connected,
        False = disconnected.
        """
        self._callbacks.append(callback)

    def read_sample(self) -> dict | None:
        """Snapshot the latest telemetry and session data as a raw sample.

        Returns None when not connected, when iRacing is not in a session,
        or when the SDK fails mid-read.
        """
        if self.status is not ConnectionStatus.CONNECTED:
            return None

        sdk = self._sdk
        sdk.freeze_var_buffer_latest()
        try:
            telemetry = {key: sdk[key] for key in TELEMETRY_KEYS}
            session = {key: sdk[key] for key in SESSION_KEYS}
        except Exception as exc:
            _logger.warning("Failed to read iRacing sample: %s", exc)
            return None
        finally:
            sdk.unfreeze_var_buffer_latest()

        return {"telemetry": telemetry, "session": session}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fire_callbacks(self, state: bool) -> None:
        for cb in self._callbacks:
            cb(state)
