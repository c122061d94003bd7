"""
Command-line entry point for the temperature reader.
Reads one DS18B20 probe, prints the temperature and writes it to InfluxDB.

Usage:
    python3 main.py /sys/bus/w1/devices/28-0316a2798aff/w1_slave
    python3 main.py --discover
    python3 main.py --discover --no-publish
    python3 main.py --check
"""
import sys
import argparse

from pydantic import ValidationError

from w1temp import __version__
from w1temp.config import logger, configure_logging, LOG_DIR, Settings
from w1temp.errors import ReadFailure, SubmissionFailure
from w1temp.influx_client import check_db_health, publish, write_url
from sensors.ds18b20 import SensorData

EXIT_OK = 0
EXIT_READ_ERROR = 1
EXIT_SUBMIT_ERROR = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog="temperature",
        description="Read a DS18B20 one-wire sensor and publish it to InfluxDB."
    )
    parser.add_argument("path", nargs="?", metavar="PATH",
                        help="The path to the device file to read sensor data from.")
    parser.add_argument("--discover", action="store_true",
                        help="Find the first 28-* device under the configured base path.")
    parser.add_argument("--no-publish", action="store_true",
                        help="Print the temperature without writing it to InfluxDB.")
    parser.add_argument("--check", action="store_true",
                        help="Check that the InfluxDB server is reachable and exit.")
    parser.add_argument("--strict", action="store_true",
                        help="Fail on a malformed temperature field instead of reading 0.")
    parser.add_argument("--log-dir", default=LOG_DIR,
                        help="Directory for the log file (default: %(default)s).")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_sensor(args, settings):
    """Return a SensorData for the requested device, or None if discovery found nothing"""
    if args.path:
        return SensorData.for_file(args.path)

    sensor = SensorData.from_settings(settings)
    if sensor.discover() is None:
        return None
    return sensor


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not (args.path or args.discover or args.check):
        parser.error("PATH is required unless --discover or --check is given")
    if args.path and args.discover:
        parser.error("PATH and --discover cannot be used together")

    configure_logging(args.log_dir, args.verbose)

    try:
        settings = Settings.from_env()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_READ_ERROR

    if args.check:
        return EXIT_OK if check_db_health(settings) else EXIT_SUBMIT_ERROR

    try:
        sensor = resolve_sensor(args, settings)
        if sensor is None:
            logger.error(f"No DS18B20 device found under {settings.device_base_path}")
            return EXIT_READ_ERROR
        temperature = sensor.read(strict=args.strict)
    except ReadFailure as e:
        logger.error(f"Failed to read sensor data from file: {e.path}\n{e.kind}")
        return EXIT_READ_ERROR
    except ValueError as e:
        logger.error(f"Malformed temperature field: {e}")
        return EXIT_READ_ERROR

    if temperature is None:
        logger.error("Could not parse sensor data")
        return EXIT_READ_ERROR

    print(f"Temperature: {temperature} ℃")

    if args.no_publish:
        return EXIT_OK

    try:
        publish(temperature, settings)
    except SubmissionFailure as e:
        logger.error(f"Failed to submit reading to {write_url(settings)}: {e}")
        return EXIT_SUBMIT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
