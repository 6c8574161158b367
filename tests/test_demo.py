import io

import pytest

from symbolic_descent.config import DemoConfig, RegressionDemoConfig
from symbolic_descent.demo import main, run_demo, vector_to_string


def test_vector_to_string():
    assert vector_to_string([]) == "[]"
    assert vector_to_string([1, "x_0"]) == "[1, x_0]"


def test_run_demo_output():
    config = DemoConfig(regression=RegressionDemoConfig(n_samples=20, iterations=200))
    out = io.StringIO()
    run_demo(config, out=out)
    lines = out.getvalue().splitlines()
    assert lines[0] == "2.0 + 3.0*x_1"
    assert lines[1] == "[0.0, 3.0]"
    assert lines[2] == "x_0^2.0 + (x_1 + (-2.0))^4.0"
    assert len(lines) == 10
    assert lines[6].startswith("exact data: final cost")
    assert lines[8].startswith("noisy data: final cost")


def test_run_demo_pads_start_to_formula_arity():
    config = DemoConfig(regression=RegressionDemoConfig(n_samples=5, iterations=1))
    out = io.StringIO()
    run_demo(config, formula="x_0 + x_1 + x_2^2", out=out)
    lines = out.getvalue().splitlines()
    assert lines[2] == "x_0 + x_1 + x_2^2.0"
    assert lines[4].count(",") == 2


def test_main_success(capsys):
    assert main(["--samples", "20", "--iterations", "200"]) == 0
    captured = capsys.readouterr()
    assert "2.0 + 3.0*x_1" in captured.out
    assert "[0.0, 3.0]" in captured.out


def test_main_reports_parse_errors(capsys):
    assert main(["x_0 + (x_1", "--samples", "5", "--iterations", "1", "--log-level", "SILENT"]) == 1
    captured = capsys.readouterr()
    assert "error: unclosed bracket" in captured.err


def test_main_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        main(["--log-level", "LOUD"])
