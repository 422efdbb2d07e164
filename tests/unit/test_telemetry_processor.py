import logging

import pytest

from gpssim.core.config import (
    GPSParserConfig,
    ProcessorConfig,
    create_default_config,
    create_strict_config,
)
from gpssim.telemetry.data_point import SimDataPoint
from gpssim.telemetry.telemetry_processor import TelemetryProcessor


def make_record(week: int) -> SimDataPoint:
    return SimDataPoint([
        f"SC[0].AC.GPS[0].Week = {week}",
        f"SC[0].AC.GPS[1].Week = {week + 1}",
        "SC[0].AC.GPS[0].Sec = 10.5",
        "SC[0].AC.GPS[1].Sec = 20.5",
    ])


def test_one_frame_per_receiver():
    proc = TelemetryProcessor(ProcessorConfig(receivers=[(0, 0), (0, 1)]))
    frames = proc.process_record(make_record(100))

    assert [(f.spacecraft, f.gps) for f in frames] == [(0, 0), (0, 1)]
    assert not frames[0].data_point.is_parsed
    assert frames[0].data_point.gps_week == 100
    assert frames[1].data_point.gps_week == 101
    assert frames[1].data_point.gps_frac_sec == pytest.approx(0.5)


def test_history_is_bounded():
    proc = TelemetryProcessor(ProcessorConfig(max_history=2))
    for week in (1, 2, 3):
        proc.process_record(make_record(week))

    latest = proc.get_latest()
    assert [f.data_point.gps_week for f in latest] == [2, 3]

    stats = proc.get_statistics()
    assert stats['records_received'] == 3
    assert stats['frames_processed'] == 3
    assert stats['history_size'] == 2

    proc.clear_history()
    assert proc.get_latest() == []


def test_callbacks_and_callback_errors(caplog):
    caplog.set_level(logging.ERROR, logger="gpssim")
    proc = TelemetryProcessor(create_default_config())
    seen = []

    def broken(frame):
        raise RuntimeError("boom")

    proc.register_gps_callback(seen.append)
    proc.register_gps_callback(broken)
    proc.process_text("SC[0].AC.GPS[0].Week = 7\n\nSC[0].AC.GPS[0].Alt = 1.0\n")

    assert len(seen) == 1
    assert seen[0].data_point.gps_week == 7
    assert proc.get_statistics()['errors'] == 1
    assert "GPS callback failed" in caplog.text


def test_strict_config_drops_bad_data_points():
    proc = TelemetryProcessor(create_strict_config())
    frames = proc.process_record(["SC[0].AC.GPS[0].Week = bad"])

    assert frames == []
    assert proc.get_statistics()['parse_errors'] == 1

    frames = proc.process_record(make_record(5))
    assert len(frames) == 1
    assert frames[0].data_point.is_parsed


def test_strict_lazy_parser_config_fails_at_processing_time():
    config = ProcessorConfig(parser=GPSParserConfig(strict=True, eager_parse=False))
    proc = TelemetryProcessor(config)
    seen = []
    proc.register_gps_callback(lambda frame: seen.append(frame.data_point.gps_week))

    frames = proc.process_record(["SC[0].AC.GPS[0].Week = bad"])

    assert frames == []
    assert seen == []
    stats = proc.get_statistics()
    assert stats['parse_errors'] == 1
    assert stats['errors'] == 0
    assert config.parser.eager_parse is False


def test_async_processing():
    proc = TelemetryProcessor()
    seen = []
    proc.register_gps_callback(lambda frame: seen.append(frame.data_point.gps_week))

    proc.start_async_processing()
    for week in (10, 11, 12):
        proc.queue_record(make_record(week))
    proc.stop_async_processing()

    assert sorted(seen) == [10, 11, 12]
    assert proc.get_statistics()['frames_processed'] == 3


def test_config_validation():
    with pytest.raises(AssertionError):
        ProcessorConfig(receivers=[])
    with pytest.raises(AssertionError):
        ProcessorConfig(receivers=[(0, -1)])
    with pytest.raises(AssertionError):
        ProcessorConfig(max_history=0)
