"""
Configuration and constants for the temperature reader.
Every setting can be overridden from the environment or a .env file.
"""
import os
import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)

# Logging configuration
LOG_DIR = "logs"
LOG_FILE_NAME = "w1temp.log"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# InfluxDB defaults
DEFAULT_INFLUX_HOST = "localhost"
DEFAULT_INFLUX_PORT = 8086
DEFAULT_INFLUX_DB = "temperature"
DEFAULT_MEASUREMENT = "temperature"
DEFAULT_TAG_KEY = "collector"
DEFAULT_TAG_VALUE = "raspberrypi-1"

# One-wire sysfs defaults
DEFAULT_DEVICE_BASE_PATH = "/sys/bus/w1/devices"
DEFAULT_DEVICE_FILE_NAME = "w1_slave"


def configure_logging(log_dir=LOG_DIR, verbose=False):
    """Log to both console and a file under log_dir"""
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, LOG_FILE_NAME)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
    return log_file


class Settings(BaseModel):
    """Destination database and device location for one measurement cycle"""
    host: str = DEFAULT_INFLUX_HOST
    port: int = Field(DEFAULT_INFLUX_PORT, ge=1, le=65535)
    database: str = DEFAULT_INFLUX_DB
    measurement: str = DEFAULT_MEASUREMENT
    tag_key: str = DEFAULT_TAG_KEY
    tag_value: str = DEFAULT_TAG_VALUE
    device_base_path: str = DEFAULT_DEVICE_BASE_PATH
    device_file_name: str = DEFAULT_DEVICE_FILE_NAME
    # Passed straight to requests; None waits indefinitely
    request_timeout: Optional[float] = Field(None, gt=0)

    @classmethod
    def from_env(cls, **overrides):
        """
        Build settings from environment variables.
        Keyword overrides win over the environment; unset values keep defaults.
        """
        env = {
            "host": os.getenv("INFLUX_HOST"),
            "port": os.getenv("INFLUX_PORT"),
            "database": os.getenv("INFLUX_DB"),
            "measurement": os.getenv("INFLUX_MEASUREMENT"),
            "tag_key": os.getenv("INFLUX_TAG_KEY"),
            "tag_value": os.getenv("INFLUX_TAG_VALUE"),
            "device_base_path": os.getenv("W1_DEVICE_BASE_PATH"),
            "device_file_name": os.getenv("W1_DEVICE_FILE_NAME"),
            "request_timeout": os.getenv("INFLUX_TIMEOUT"),
        }
        values = {key: value for key, value in env.items() if value}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
