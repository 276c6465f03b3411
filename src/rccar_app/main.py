import argparse
import logging
import sys

# Use absolute imports so this works when frozen as a script entrypoint.
from rccar_app.app import APP_NAME, configure_logging, create_application, create_main_window
from rccar_app.config import load_app_config
from rccar_app.input.serial_backend import SerialTransport, TransportError, list_ports

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rccar-controller", description=APP_NAME)
    parser.add_argument("--port", help="Serial port of the car (overrides config.ini)")
    parser.add_argument("--baudrate", type=int, help="Serial baud rate (overrides config.ini)")
    parser.add_argument(
        "--list-ports",
        action="store_true",
        help="Print the available serial ports and exit",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def print_ports() -> None:
    ports = list_ports()
    if not ports:
        print("No serial ports found")
        return
    for p in ports:
        print(f"{p.device}\t{p.description}" if p.description else p.device)


def _report_startup_failure(message: str) -> None:
    from PySide6.QtWidgets import QMessageBox

    QMessageBox.critical(None, APP_NAME, message)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.list_ports:
        print_ports()
        return 0

    app = create_application()
    cfg = load_app_config()
    port = args.port or cfg.serial.port
    baudrate = args.baudrate or cfg.serial.baudrate

    transport = SerialTransport()
    try:
        transport.open(port, baudrate=baudrate, write_timeout=cfg.serial.write_timeout)
    except TransportError as e:
        logger.error("%s", e)
        _report_startup_failure(str(e))
        return 1

    def on_fatal_error(message: str) -> None:
        # A partially sent command may leave the car moving; do not carry on.
        logger.error("Transport failure, exiting: %s", message)
        app.exit(1)

    try:
        window = create_main_window(transport, port_name=port, ui=cfg.ui)
        window.fatal_error.connect(on_fatal_error)
        window.show()
        return app.exec()
    finally:
        transport.close()


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
