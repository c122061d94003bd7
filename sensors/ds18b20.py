"""
DS18B20 one-wire temperature sensor.

The w1-therm kernel driver exposes each probe as a directory named after
its family code and serial number (e.g. ``28-0316a2798aff``) containing a
``w1_slave`` file that looks like:

    98 01 4b 46 7f ff 0c 10 19 : crc=19 YES
    98 01 4b 46 7f ff 0c 10 19 t=25500

The value after ``t=`` is the temperature in milli-degrees Celsius.
"""
import os
import re

from w1temp.config import logger
from w1temp.errors import ReadFailure, classify_os_error

DEVICE_FAMILY_PREFIX = "28-"

# "crc=", then "t=": the temperature follows the second '='
TEMPERATURE_FIELD_INDEX = 2
MILLI_DEGREES_PER_DEGREE = 1000.0

# Plain decimal or exponent notation, or inf/infinity/nan. No whitespace,
# digit separators or non-ASCII digits.
NUMBER_PATTERN = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE
)


def select_device(candidates):
    """
    Return the first candidate name carrying the DS18B20 family prefix, or None.

    Candidates are scanned in the order given. When several probes match the
    first one wins, so the result depends on the caller's ordering.
    """
    for name in candidates:
        if name.startswith(DEVICE_FAMILY_PREFIX):
            return name
    return None


def read_raw(path):
    """Read the whole device file as text, raising ReadFailure on any error"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFailure(path, classify_os_error(e)) from e

    logger.debug(f"Read {len(data)} characters from {path}")
    return data


def parse_field(raw):
    """
    Extract the raw temperature field from device file contents.

    This is positional: the text is split on every '=' and the third segment
    is returned stripped. Input with fewer than three segments gives None.
    """
    segments = raw.split("=")
    if len(segments) <= TEMPERATURE_FIELD_INDEX:
        return None
    return segments[TEMPERATURE_FIELD_INDEX].strip()


def convert(field, strict=False):
    """
    Convert a milli-degree field to degrees Celsius.

    A field that is not a plain number (no surrounding whitespace, no "_"
    separators, ASCII digits only) counts as 0.0 unless strict is set, in which
    case a ValueError is raised.
    """
    if field.isascii() and NUMBER_PATTERN.fullmatch(field):
        value = float(field)
    else:
        if strict:
            raise ValueError(f"Malformed temperature field {field!r}")
        logger.debug(f"Malformed temperature field {field!r}, using 0.0")
        value = 0.0

    return value / MILLI_DEGREES_PER_DEGREE


class SensorData:
    """
    One measurement cycle for a single probe.

    device_path is the probe directory name (e.g. "28-0316a2798aff") and is
    None until discover() finds one or it is passed in. temperature is None
    until read() has parsed and converted a value.
    """
    def __init__(self, base_path, file_name, device_path=None):
        self.base_path = base_path
        self.file_name = file_name
        self.device_path = device_path
        self.temperature = None

    @classmethod
    def from_settings(cls, settings, device_path=None):
        return cls(settings.device_base_path, settings.device_file_name, device_path)

    @classmethod
    def for_file(cls, path):
        """Build a SensorData for an explicit device file path"""
        device_dir, file_name = os.path.split(path)
        base_path, device_path = os.path.split(device_dir)
        return cls(base_path, file_name, device_path)

    @property
    def data_file(self):
        if self.device_path is None:
            return None
        return os.path.join(self.base_path, self.device_path, self.file_name)

    def discover(self, entries=None):
        """
        Pick the probe from entries, or from a listing of base_path.
        The directory listing order is whatever the filesystem returns.
        """
        if entries is None:
            try:
                entries = os.listdir(self.base_path)
            except OSError as e:
                raise ReadFailure(self.base_path, classify_os_error(e)) from e

        device = select_device(entries)
        if device is None:
            return None

        self.device_path = device
        logger.info(f"DS18B20 found: {device}")
        return device

    def read(self, strict=False):
        """
        Read, parse and convert the device file.
        Returns the temperature, or None when there is no device or no field.
        """
        path = self.data_file
        if path is None:
            return None

        field = parse_field(read_raw(path))
        if field is None:
            logger.debug(f"No temperature field in {path}")
            return None

        self.temperature = convert(field, strict=strict)
        return self.temperature
