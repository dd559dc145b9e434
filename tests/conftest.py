import datetime
import io
import logging
import pathlib

import pytest

LOG_DIR = pathlib.Path(__file__).parent / "test-logs"


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    # Attach the TestReport to the item so fixtures can see the outcome in teardown.
    outcome = yield
    rep = outcome.get_result()
    setattr(item, "rep_" + rep.when, rep)


@pytest.fixture(autouse=True)
def capture_test_logs(request):
    """Capture the 'eartri' logger family per test and write it to a file
    only when the test fails.

    The logger state (handlers, level, propagation) is restored afterwards,
    so tests calling configure_logging() do not leak into each other.
    """
    log = logging.getLogger("eartri")
    prev_handlers = list(log.handlers)
    prev_level = log.level
    prev_propagate = log.propagate

    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)

    try:
        yield
    finally:
        for h in list(log.handlers):
            log.removeHandler(h)
        for h in prev_handlers:
            log.addHandler(h)
        log.setLevel(prev_level)
        log.propagate = prev_propagate

        rep = getattr(request.node, "rep_call", None)
        if rep is not None and getattr(rep, "outcome", None) == "failed":
            nodeid = request.node.nodeid.replace("::", "__").replace("/", "_")
            ts = datetime.datetime.now().strftime("%Y%m%dT%H%M%S")
            try:
                LOG_DIR.mkdir(exist_ok=True)
                with open(LOG_DIR / "{}__{}.log".format(nodeid, ts), "w", encoding="utf-8") as f:
                    f.write("=== Test: {}\n".format(request.node.nodeid))
                    f.write("=== Timestamp: {}\n\n".format(ts))
                    f.write(buf.getvalue())
            except OSError:
                pass
