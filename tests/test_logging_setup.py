import logging

from housekeeper.logging_setup import HybridFormatter, setup_logging


def make_record(msg, args=(), **extra):
    record = logging.LogRecord("housekeeper", logging.INFO, __file__, 0, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_plain_record():
    line = HybridFormatter().format(make_record("Current disk usage: %s%%", (42,)))
    assert line.endswith(" - INFO - Current disk usage: 42%")


def test_file_transfer_record():
    record = make_record("Uploaded 1.00KB", file_op=True, src="/out/a.csv", dest="ftp://host:21/in/a.csv")
    lines = HybridFormatter().format(record).splitlines()
    assert lines[0].endswith(" - INFO - File Transfer:")
    assert lines[1:] == ["  From: /out/a.csv", "  To: ftp://host:21/in/a.csv", "  Uploaded 1.00KB"]


def test_setup_logging_writes_to_log_file(config):
    config["Settings"]["LOG_LEVEL"] = "WARNING"
    logger = setup_logging(config, console_log=False)

    logging.info("not written")
    logging.warning("disk is filling up")
    for handler in logger.handlers:
        handler.flush()

    with open(config["Paths"]["LOG_PATH"]) as log_file:
        content = log_file.read()
    assert "WARNING - disk is filling up" in content
    assert "not written" not in content
