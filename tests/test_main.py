from unittest.mock import MagicMock, patch

import pytest

import main
from w1temp.errors import SubmissionFailure


@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    monkeypatch.setattr(main, "configure_logging", lambda *args, **kwargs: None)


@pytest.fixture
def device_env(monkeypatch, device_tree):
    monkeypatch.setenv("W1_DEVICE_BASE_PATH", str(device_tree))
    return device_tree


def test_read_and_publish(device_tree, capsys):
    path = str(device_tree / "28-0316a2798aff" / "w1_slave")
    with patch("w1temp.influx_client.requests.post") as mock_post:
        mock_post.return_value = MagicMock(status_code=204, text="")
        assert main.main([path]) == main.EXIT_OK

    assert "Temperature: 25.5 ℃" in capsys.readouterr().out
    body = mock_post.call_args.kwargs["data"].decode("utf-8")
    assert body.endswith("value=25.5")
    assert mock_post.call_args.args[0] == "http://localhost:8086/write?db=temperature"


def test_discover_without_publish(device_env, capsys):
    with patch("w1temp.influx_client.requests.post") as mock_post:
        assert main.main(["--discover", "--no-publish"]) == main.EXIT_OK

    mock_post.assert_not_called()
    assert "Temperature: 25.5 ℃" in capsys.readouterr().out


def test_discover_no_device(monkeypatch, tmp_path, caplog):
    (tmp_path / "00-1000000").mkdir()
    monkeypatch.setenv("W1_DEVICE_BASE_PATH", str(tmp_path))
    assert main.main(["--discover"]) == main.EXIT_READ_ERROR
    messages = [r.getMessage() for r in caplog.records if "No DS18B20 device" in r.getMessage()]
    assert len(messages) == 1


def test_missing_file(tmp_path):
    with patch("w1temp.influx_client.requests.post") as mock_post:
        assert main.main([str(tmp_path / "28-x" / "w1_slave")]) == main.EXIT_READ_ERROR
    mock_post.assert_not_called()


def test_unparseable_file(tmp_path):
    path = tmp_path / "w1_slave"
    path.write_text("", encoding="utf-8")
    with patch("w1temp.influx_client.requests.post") as mock_post:
        assert main.main([str(path)]) == main.EXIT_READ_ERROR
    mock_post.assert_not_called()


def test_malformed_field_reads_zero(tmp_path, capsys):
    path = tmp_path / "w1_slave"
    path.write_text("crc=19 YES\nt=oops\n", encoding="utf-8")
    assert main.main([str(path), "--no-publish"]) == main.EXIT_OK
    assert "Temperature: 0.0 ℃" in capsys.readouterr().out


def test_malformed_field_strict(tmp_path):
    path = tmp_path / "w1_slave"
    path.write_text("crc=19 YES\nt=oops\n", encoding="utf-8")
    assert main.main([str(path), "--strict"]) == main.EXIT_READ_ERROR


def test_submission_failure(device_tree, capsys):
    path = str(device_tree / "28-0316a2798aff" / "w1_slave")
    with patch.object(main, "publish", side_effect=SubmissionFailure("http://x/write?db=t")):
        assert main.main([path]) == main.EXIT_SUBMIT_ERROR
    # The reading is still shown before the write is attempted
    assert "Temperature: 25.5 ℃" in capsys.readouterr().out


def test_check(monkeypatch):
    monkeypatch.setattr(main, "check_db_health", lambda settings: True)
    assert main.main(["--check"]) == main.EXIT_OK
    monkeypatch.setattr(main, "check_db_health", lambda settings: False)
    assert main.main(["--check"]) == main.EXIT_SUBMIT_ERROR


def test_invalid_configuration(monkeypatch, device_env):
    monkeypatch.setenv("INFLUX_PORT", "0")
    assert main.main(["--discover"]) == main.EXIT_READ_ERROR


def test_path_required():
    with pytest.raises(SystemExit) as excinfo:
        main.main([])
    assert excinfo.value.code == 2


def test_path_and_discover_rejected(device_tree):
    path = str(device_tree / "28-0316a2798aff" / "w1_slave")
    with pytest.raises(SystemExit) as excinfo:
        main.main([path, "--discover"])
    assert excinfo.value.code == 2
