import io

import pytest

from gpssim.cli import main
from gpssim.core.log import get_logger


RECORD = """\
SC[0].AC.GPS[0].Rollover = 2
SC[0].AC.GPS[0].Week = 100
SC[0].AC.GPS[0].Sec = 50000.25
SC[0].AC.GPS[1].Week = 300
"""


@pytest.fixture(autouse=True)
def reset_package_logger():
    logger = get_logger()
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_block_output(tmp_path, capsys):
    path = tmp_path / "record.txt"
    path.write_text(RECORD)

    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("GPS Data Point:")
    assert "     2,   100,  50000, 0.2500" in out


def test_full_output_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(RECORD))

    assert main(["--gps", "1", "--full"]) == 0
    out = capsys.readouterr().out
    assert "GPS Time: 0/300/0/0.0" in out
    assert out.count("\n") == 1


def test_strict_failure_exit_code(tmp_path, capsys):
    path = tmp_path / "record.txt"
    path.write_text(RECORD)

    assert main([str(path), "--gps", "5", "--strict"]) == 1
    err = capsys.readouterr().err
    assert "error:" in err
    assert "no line matched prefix SC[0].AC.GPS[5]." in err
