import logging

from .config import get_log_level
from .interpreter import Interpreter

logger = logging.getLogger(__name__)

SOURCE = """
# Weather formulas
temp = 0
humidity = 7
fahrenheit = 86
celsius = 30

print("Dew point:")
print(dewpoint(temp, humidity))
print("Fahrenheit to Celsius:")
print(ftoc(fahrenheit))
print("Celsius to Fahrenheit:")
print(ctof(celsius))

if temp > 25 {
    print("It's a hot day!")
} else {
    print("It's a cool day!")
}

if humidity < 50 {
    print("It's a dry day!")
} else {
    print("It's a humid day!")
}

function factorial(n) {
    if n < 2 { 1 } else { n * factorial(n - 1) }
}
print(factorial(25))
print(_pi_)

# Bell pair: both measurements always agree
a = qubit(0)
b = qubit(0)
hadamard(a)
cnot(a, b)
print(measure(a) == measure(b))
"""


def main(source: str = SOURCE, **kwargs):
    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(name)s: %(message)s")
    logger.info("running wthr program (%d lines)", source.count("\n"))
    result = Interpreter(**kwargs).run(source)
    logger.info("done")
    return result


if __name__ == "__main__":
    main()
