"""
Failure types raised by the sensor reader and the InfluxDB client.

A missing temperature field is not an error: parsing returns None and the
caller stops there.
"""

NOT_FOUND = "not_found"
PERMISSION_DENIED = "permission_denied"
IS_A_DIRECTORY = "is_a_directory"
DECODE_ERROR = "decode_error"
IO_ERROR = "io_error"


def classify_os_error(error):
    """Map an exception raised while reading a file to a failure category"""
    if isinstance(error, FileNotFoundError):
        return NOT_FOUND
    if isinstance(error, PermissionError):
        return PERMISSION_DENIED
    if isinstance(error, IsADirectoryError):
        return IS_A_DIRECTORY
    if isinstance(error, UnicodeDecodeError):
        return DECODE_ERROR
    return IO_ERROR


class SensorError(Exception):
    """Base class for sensor pipeline failures"""
    pass


class ReadFailure(SensorError):
    """
    Raised when the device file cannot be opened or read to completion.
    `kind` holds the category returned by classify_os_error().
    """
    def __init__(self, path, kind):
        self.path = path
        self.kind = kind
        super().__init__(f"Could not read sensor data from {path} ({kind})")


class SubmissionFailure(SensorError):
    """
    Raised when a reading could not be written to the database.
    `status_code` is None when the request never got a response.
    """
    def __init__(self, url, status_code=None):
        self.url = url
        self.status_code = status_code
        if status_code is None:
            message = f"Could not submit reading to {url}"
        else:
            message = f"Could not submit reading to {url} (HTTP {status_code})"
        super().__init__(message)
