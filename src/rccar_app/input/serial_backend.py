from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import serial
import serial.tools.list_ports

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 9600
DEFAULT_WRITE_TIMEOUT = 1.0


class TransportError(Exception):
    """The serial link to the car could not be opened or written to."""


@dataclass(frozen=True, slots=True)
class SerialPortInfo:
    """Minimal port info needed for selection/opening."""

    device: str
    description: str


def list_ports() -> list[SerialPortInfo]:
    """Return the serial ports visible to the OS, sorted by device name."""
    ports = []
    for p in serial.tools.list_ports.comports():
        device = (p.device or "").strip()
        if not device:
            continue
        description = (p.description or "").strip()
        if description.lower() == "n/a":
            description = ""
        ports.append(SerialPortInfo(device=device, description=description))
    return sorted(ports, key=lambda p: p.device)


class SerialTransport:
    """Manage a single opened serial port used as the command sink."""

    def __init__(self) -> None:
        self._handle: Optional[serial.Serial] = None
        self._port: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def port(self) -> Optional[str]:
        return self._port

    @property
    def handle(self) -> Optional[serial.Serial]:
        return self._handle

    def open(
        self,
        port: str,
        *,
        baudrate: int = DEFAULT_BAUDRATE,
        write_timeout: Optional[float] = DEFAULT_WRITE_TIMEOUT,
        read_timeout: Optional[float] = None,
    ) -> None:
        self.close()
        try:
            handle = serial.Serial(
                port=port,
                baudrate=int(baudrate),
                timeout=read_timeout,
                write_timeout=write_timeout,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            raise TransportError(f"Failed to open {port}: {e}") from e
        self._handle = handle
        self._port = port
        logger.info("Opened %s at %d baud", port, int(baudrate))

    def close(self) -> None:
        if self._handle is None:
            return
        try:
            self._handle.close()
        finally:
            logger.info("Closed %s", self._port)
            self._handle = None
            self._port = None

    def write(self, data: bytes) -> None:
        """Write all of `data` and flush, or raise TransportError."""
        # Read once; close() may run on another thread.
        handle = self._handle
        if handle is None:
            raise TransportError("Serial port is not open")
        if not data:
            return
        try:
            written = handle.write(data)
            handle.flush()
        except serial.SerialTimeoutException as e:
            raise TransportError(f"Timed out writing to {self._port}") from e
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Failed writing to {self._port}: {e}") from e
        if written is not None and written != len(data):
            raise TransportError(f"Short write to {self._port}: {written} of {len(data)} bytes")
        logger.debug("Sent %r", data)

    def __enter__(self) -> "SerialTransport":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
