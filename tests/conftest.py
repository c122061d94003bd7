import pytest

from w1temp.config import Settings

VALID_READING = "98 01 4b 46 7f ff 0c 10 19 : crc=19 YES\n98 01 4b 46 7f ff 0c 10 19 t=25500\n"

ENV_VARS = [
    "INFLUX_HOST", "INFLUX_PORT", "INFLUX_DB", "INFLUX_MEASUREMENT",
    "INFLUX_TAG_KEY", "INFLUX_TAG_VALUE", "W1_DEVICE_BASE_PATH",
    "W1_DEVICE_FILE_NAME", "INFLUX_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # A developer .env must not leak into the tests
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path):
    return Settings(device_base_path=str(tmp_path), host="influx.local", port=8086)


@pytest.fixture
def device_tree(tmp_path):
    """A fake /sys/bus/w1/devices with one DS18B20 and one other family device"""
    (tmp_path / "00-1000000").mkdir()
    probe = tmp_path / "28-0316a2798aff"
    probe.mkdir()
    (probe / "w1_slave").write_text(VALID_READING, encoding="utf-8")
    return tmp_path
