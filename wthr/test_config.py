import io
import logging

import pytest

from wthr import config
from wthr.interpreter import Interpreter


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("WTHR_SEED", "WTHR_PRECISION", "WTHR_MAX_QUBITS", "WTHR_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    assert config.get_seed() is None
    assert config.get_precision() == config.DEFAULT_PRECISION
    assert config.get_max_qubits() == config.DEFAULT_MAX_QUBITS
    assert config.get_log_level() == logging.WARNING


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("WTHR_SEED", "42")
    monkeypatch.setenv("WTHR_PRECISION", " 8 ")
    monkeypatch.setenv("WTHR_MAX_QUBITS", "4")
    monkeypatch.setenv("WTHR_LOG_LEVEL", "debug")
    assert config.get_seed() == 42
    assert config.get_precision() == 8
    assert config.get_max_qubits() == 4
    assert config.get_log_level() == logging.DEBUG


def test_blank_value_means_default(monkeypatch):
    monkeypatch.setenv("WTHR_PRECISION", "")
    assert config.get_precision() == config.DEFAULT_PRECISION


@pytest.mark.parametrize(
    "var,value,getter",
    [
        ("WTHR_SEED", "abc", config.get_seed),
        ("WTHR_PRECISION", "0", config.get_precision),
        ("WTHR_MAX_QUBITS", "1.5", config.get_max_qubits),
        ("WTHR_LOG_LEVEL", "LOUD", config.get_log_level),
    ],
)
def test_invalid_values_name_the_variable(monkeypatch, var, value, getter):
    monkeypatch.setenv(var, value)
    with pytest.raises(ValueError, match=var):
        getter()


def test_interpreter_reads_environment(monkeypatch):
    monkeypatch.setenv("WTHR_PRECISION", "3")
    monkeypatch.setenv("WTHR_MAX_QUBITS", "1")
    out = io.StringIO()
    interp = Interpreter(out=out)
    interp.run("print(2 / 3)")
    assert out.getvalue() == "0.667~3\n"
    assert interp.simulator.max_qubits == 1


def test_keyword_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("WTHR_PRECISION", "3")
    out = io.StringIO()
    Interpreter(out=out, precision=6).run("print(2 / 3)")
    assert out.getvalue() == "0.666667~6\n"


def test_seed_makes_measurements_reproducible(monkeypatch):
    monkeypatch.setenv("WTHR_SEED", "99")
    source = "r = 0\n" + "\n".join(
        f"r{i} = measure(hadamard(qubit()))" for i in range(16)
    ) + "\n" + "r0 + r1 * 2 + r2 * 4 + r3 * 8 + r4 * 16 + r5 * 32 + r6 * 64 + r7 * 128"
    assert Interpreter().run(source) == Interpreter().run(source)
