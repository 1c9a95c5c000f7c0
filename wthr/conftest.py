import io

import pytest

from wthr.interpreter import Interpreter


@pytest.fixture
def out():
    """Captures everything print writes."""
    return io.StringIO()


@pytest.fixture
def interp(out):
    """Fresh interpreter with a fixed measurement seed."""
    return Interpreter(out=out, seed=1234, precision=20)


@pytest.fixture
def run(interp, out):
    """Run a program and return the printed lines."""
    def _run(source):
        interp.run(source)
        return out.getvalue().splitlines()
    return _run
