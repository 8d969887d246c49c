import sys

import run_tests


def test_unit_suite_runs_offline():
    cmd = run_tests.TestRunner(suite="unit", allure_report=False)._build_pytest_command()

    assert cmd[:3] == [sys.executable, "-m", "pytest"]
    assert "tuel_autotest/unit" in cmd
    assert "--run-live" not in cmd
    assert cmd[-1] == "-q"


def test_ui_suite_enables_live_tests_and_filters():
    runner = run_tests.TestRunner(suite="ui", tags=["P0", "smoke"], parallel=4, verbose=True)
    cmd = runner._build_pytest_command()

    assert "tuel_autotest/ui_testing/tests" in cmd
    assert "--run-live" in cmd
    assert cmd[cmd.index("-m", 3) + 1] == "P0 or smoke"
    assert cmd[cmd.index("-n") + 1] == "4"
    assert "--alluredir" in cmd


def test_browser_settings_passed_through_environment():
    env = run_tests.TestRunner(suite="ui", browser="firefox", headless=False)._build_env()

    assert env["UI_BROWSER"] == "firefox"
    assert env["UI_HEADLESS"] == "false"


def test_ui_suite_without_tags_has_no_marker_filter():
    cmd = run_tests.TestRunner(suite="ui", allure_report=False)._build_pytest_command()

    assert "-m" not in cmd[3:]


def test_credentials_read_from_auth_environment(monkeypatch):
    monkeypatch.setenv("AUTH_USERNAME", "ci-user@example.com")
    monkeypatch.setenv("AUTH_PASSWORD", "ci-secret")

    assert run_tests.TestRunner(suite="ui")._check_credentials()


def test_credentials_missing_password(monkeypatch):
    monkeypatch.setenv("AUTH_USERNAME", "ci-user@example.com")
    monkeypatch.delenv("AUTH_PASSWORD", raising=False)

    assert not run_tests.TestRunner(suite="ui")._check_credentials()
