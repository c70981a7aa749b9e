import io

from mysticeti.logs import LogsAnalyzer


def test_node_errors_counted():
    analyzer = LogsAnalyzer()
    analyzer.set_node_errors("x ERROR a\n" * 5)
    assert analyzer.node_errors == 5
    assert analyzer.node_panic is False


def test_node_panic_detected():
    analyzer = LogsAnalyzer()
    analyzer.set_node_errors("thread 'main' panicked at")
    assert analyzer.node_panic is True


def test_error_without_leading_space_ignored():
    analyzer = LogsAnalyzer()
    analyzer.set_node_errors("ERROR at start")
    assert analyzer.node_errors == 0


def test_client_errors_keep_maximum():
    analyzer = LogsAnalyzer()
    analyzer.set_client_errors(" ERROR" * 4)
    analyzer.set_client_errors(" ERROR" * 2)
    assert analyzer.client_errors == 4
    analyzer.set_client_errors(" ERROR" * 6)
    assert analyzer.client_errors == 6


def test_ordering_prefers_panics_and_more_errors():
    clean = LogsAnalyzer()
    noisy = LogsAnalyzer(node_errors=3)
    panicked = LogsAnalyzer(client_panic=True)
    assert noisy > clean
    assert clean < noisy
    assert panicked > noisy
    assert max([clean, noisy]) is noisy


def test_equal_analyzers_compare_less_not_greater():
    a, b = LogsAnalyzer(), LogsAnalyzer()
    assert a == b
    assert a < b
    assert not a > b


def test_summary_node_panic():
    stream = io.StringIO()
    LogsAnalyzer(node_panic=True, client_panic=True).print_summary(stream)
    out = stream.getvalue()
    assert "Node(s) panicked!" in out
    assert "Client(s)" not in out


def test_summary_client_panic():
    stream = io.StringIO()
    LogsAnalyzer(client_panic=True).print_summary(stream)
    assert "Client(s) panicked!" in stream.getvalue()


def test_summary_errors():
    stream = io.StringIO()
    LogsAnalyzer(node_errors=2, client_errors=7).print_summary(stream)
    assert "Logs contain errors (node: 2, client: 7)" in stream.getvalue()


def test_summary_clean_prints_nothing():
    stream = io.StringIO()
    LogsAnalyzer().print_summary(stream)
    assert stream.getvalue() == ""