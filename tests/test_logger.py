import io

from homiekit.logger import Logger


def test_write_goes_to_printer():
    stream = io.StringIO()
    logger = Logger(stream)
    assert logger.write("hello") == 5
    assert stream.getvalue() == "hello"


def test_line_joins_arguments_and_ends_line():
    stream = io.StringIO()
    logger = Logger(stream)
    logger.line("Port: ", 1883)
    logger.line()
    assert stream.getvalue() == "Port: 1883\n\n"


def test_disabled_logging_writes_nothing():
    stream = io.StringIO()
    logger = Logger(stream)
    logger.set_logging(False)
    assert logger.write("hidden") == 0
    assert logger.line("hidden") == 0
    assert stream.getvalue() == ""
    logger.set_logging(True)
    logger.write("shown")
    assert stream.getvalue() == "shown"


def test_set_printer_switches_output():
    first, second = io.StringIO(), io.StringIO()
    logger = Logger(first)
    logger.write("a")
    logger.set_printer(second)
    logger.write("b")
    assert (first.getvalue(), second.getvalue()) == ("a", "b")


def test_default_printer_is_stdout(capsys):
    logger = Logger()
    logger.line("to stdout")
    assert capsys.readouterr().out == "to stdout\n"