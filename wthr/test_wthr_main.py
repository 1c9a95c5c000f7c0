import logging

from wthr import wthr_main


def test_main_runs_demo(capsys, monkeypatch):
    monkeypatch.setenv("WTHR_SEED", "3")
    result = wthr_main.main()
    lines = capsys.readouterr().out.splitlines()
    assert lines[:6] == [
        "Dew point:",
        "-18.6",
        "Fahrenheit to Celsius:",
        "30",
        "Celsius to Fahrenheit:",
        "86",
    ]
    assert "It's a cool day!" in lines
    assert "It's a dry day!" in lines
    assert "15511210043330985984000000" in lines
    assert lines[-1] == "true"
    assert result is not None


def test_main_logs_run(caplog):
    with caplog.at_level(logging.INFO, logger="wthr.wthr_main"):
        wthr_main.main('print("x")', seed=0)
    assert "running wthr program" in caplog.text
