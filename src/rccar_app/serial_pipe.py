"""Pipe raw bytes between stdin/stdout and a serial port.

Handy for talking to the car's command interpreter by hand, e.g.
`echo "1 255 set-motor-speed" | rccar-serial-pipe --port /dev/ttyUSB0`.
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from collections.abc import Callable

from PySide6.QtCore import QCoreApplication

from .app import APP_NAME, configure_logging
from .config import load_serial_config
from .input.serial_backend import SerialTransport, TransportError

logger = logging.getLogger(__name__)

TO_PORT_CHUNK = 32
FROM_PORT_CHUNK = 1024


def pump(
    read: Callable[[int], bytes | None],
    write: Callable[[bytes], object],
    flush: Callable[[], object] | None = None,
    *,
    chunk_size: int = TO_PORT_CHUNK,
    stop: threading.Event | None = None,
) -> int:
    """Copy chunks from `read` to `write` until EOF or `stop` is set.

    `read` returning None means "nothing yet" (a read timeout); an empty
    bytes object means end of stream. Returns the number of bytes copied.
    """
    total = 0
    while stop is None or not stop.is_set():
        data = read(chunk_size)
        if data is None:
            continue
        if not data:
            break
        write(data)
        if flush is not None:
            flush()
        total += len(data)
    return total


def _stdin_to_port(transport: SerialTransport, stop: threading.Event) -> None:
    # End of input only ends this direction; replies keep flowing to stdout.
    stdin = sys.stdin.buffer
    try:
        pump(stdin.read1, transport.write, chunk_size=TO_PORT_CHUNK, stop=stop)
    except TransportError as e:
        logger.error("%s", e)
        stop.set()


def _port_to_stdout(transport: SerialTransport, stop: threading.Event) -> None:
    handle = transport.handle
    stdout = sys.stdout.buffer

    def read(size: int) -> bytes | None:
        # Block for at least one byte, then take whatever else is queued.
        data = handle.read(1)
        if not data:
            return None
        waiting = handle.in_waiting
        if waiting:
            data += handle.read(min(waiting, size - 1))
        return data

    try:
        pump(read, stdout.write, stdout.flush, chunk_size=FROM_PORT_CHUNK, stop=stop)
    except (OSError, ValueError) as e:
        # pyserial's SerialException derives from OSError
        if not stop.is_set():
            logger.error("Serial read failed: %s", e)
    finally:
        stop.set()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rccar-serial-pipe",
        description="Pipe stdin/stdout to a serial port",
    )
    parser.add_argument("--port", help="Serial port (defaults to config.ini)")
    parser.add_argument("--baudrate", type=int, help="Baud rate (defaults to config.ini)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (logs go to stderr)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    QCoreApplication.setApplicationName(APP_NAME)  # locates config.ini
    cfg = load_serial_config()
    port = args.port or cfg.port
    baudrate = args.baudrate or cfg.baudrate

    transport = SerialTransport()
    try:
        transport.open(port, baudrate=baudrate, write_timeout=cfg.write_timeout, read_timeout=0.1)
    except TransportError as e:
        logger.error("%s", e)
        return 1

    stop = threading.Event()
    writer = threading.Thread(target=_stdin_to_port, args=(transport, stop), name="stdin->serial", daemon=True)
    reader = threading.Thread(target=_port_to_stdout, args=(transport, stop), name="serial->stdout", daemon=True)
    writer.start()
    reader.start()
    try:
        # Runs until the port fails, a write fails or Ctrl-C.
        while reader.is_alive():
            reader.join(0.2)
    except KeyboardInterrupt:
        stop.set()
    finally:
        transport.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
