"""
InfluxDB communication for temperature readings.
Each reading is sent as a single line-protocol POST.
No retry, backoff or local buffering: a failed write is lost.
"""
import requests

from w1temp.config import logger, Settings
from w1temp.errors import SubmissionFailure

LINE_PROTOCOL_HEADERS = {"Content-Type": "text/plain; charset=utf-8"}
PING_TIMEOUT = 5  # seconds


def base_url(settings):
    return f"http://{settings.host}:{settings.port}"


def write_url(settings):
    """URL of the v1 write endpoint for the configured database"""
    return f"{base_url(settings)}/write?db={settings.database}"


def format_line(temp, settings):
    """
    Build a line-protocol record, e.g. ``temperature,collector=raspberrypi-1 value=25.5``.
    No timestamp is sent; the database stamps the point on arrival.
    """
    return f"{settings.measurement},{settings.tag_key}={settings.tag_value} value={float(temp)}"


def _is_success(response):
    return 200 <= response.status_code < 300


def check_db_health(settings=None):
    """Check if the InfluxDB server answers its /ping endpoint"""
    settings = settings or Settings.from_env()
    url = f"{base_url(settings)}/ping"

    try:
        response = requests.get(url, timeout=PING_TIMEOUT)
    except requests.exceptions.RequestException as e:
        logger.warning(f"InfluxDB health check failed: {e}")
        return False

    if _is_success(response):
        logger.info(f"InfluxDB server is reachable at {base_url(settings)}")
        return True

    logger.warning(f"InfluxDB health check returned status {response.status_code}")
    return False


def publish(temp, settings=None):
    """
    Write one temperature reading to InfluxDB.
    Raises SubmissionFailure on any transport error or non-2xx response.
    """
    settings = settings or Settings.from_env()
    url = write_url(settings)
    line = format_line(temp, settings)

    try:
        response = requests.post(
            url,
            data=line.encode("utf-8"),
            headers=LINE_PROTOCOL_HEADERS,
            timeout=settings.request_timeout
        )
    except requests.exceptions.Timeout as e:
        logger.error(f"InfluxDB request timeout - failed to write reading: {url}")
        raise SubmissionFailure(url) from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"InfluxDB connection error: {e}")
        raise SubmissionFailure(url) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to write reading to InfluxDB: {e}")
        raise SubmissionFailure(url) from e

    if not _is_success(response):
        logger.error(f"InfluxDB returned status {response.status_code}: {response.text}")
        raise SubmissionFailure(url, status_code=response.status_code)

    logger.info(f"Reading written to InfluxDB: {line}")
