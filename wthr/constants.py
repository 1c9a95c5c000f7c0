# File: wthr/constants.py
# -----------------------------------------------------------------------------
# Built-in constant table. Every entry is an exact Rational literal, supplied
# as data rather than computed, and the table is read-only for the lifetime of
# the process.
# -----------------------------------------------------------------------------

from fractions import Fraction
from types import MappingProxyType

# 100 decimal digits of pi.
_PI_DIGITS = (
    "3."
    "1415926535897932384626433832795028841971693993751058209749445923078164062862089986280348253421170679"
)

CONSTANTS = MappingProxyType({
    "_pi_": Fraction(_PI_DIGITS),
    # 0 degrees Celsius in kelvin
    "_kelvin_": Fraction(27315, 100),
    # Gas constant for dry air, J/(kg*K)
    "_rd_": Fraction(28705, 100),
    # Specific heat of air at constant pressure, J/(kg*K)
    "_cp_": Fraction(1005),
    # Standard atmospheric pressure, Pa
    "_p0_": Fraction(101325),
    # Latent heat of vaporization of water, J/kg
    "_lv_": Fraction(2260000),
    # Specific heat of water, J/(kg*K)
    "_cw_": Fraction(4184),
    # Density of air, kg/m^3
    "_rho_air_": Fraction(1200),
    # Density of water, kg/m^3
    "_rho_water_": Fraction(1000),
    # Gravitational acceleration, m/s^2
    "_g_": Fraction(981, 100),
})


__all__ = ["CONSTANTS"]
