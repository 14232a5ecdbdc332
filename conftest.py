import os

import pytest

from bigcalc.config import ENV_PREFIX


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep BIGCALC_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
