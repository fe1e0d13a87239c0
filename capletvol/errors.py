# -*- coding: utf-8 -*-


class CapletVolError(Exception):
    """Base class for errors raised by capletvol."""


class CapletVolConfigError(CapletVolError, ValueError):
    """Invalid construction inputs, e.g. a volatility surface too short to strip a single optionlet."""


class ImpliedVolatilityError(CapletVolError, ValueError):
    """The Black76 price cannot be reproduced within the admissible standard deviation bounds."""


class OptionletBootstrapError(CapletVolError, RuntimeError):
    """An optionlet could not be stripped. Aborts the whole stripping pass."""

    def __init__(self, message, date=None, option_type=None, strike=None, forward=None, price=None, annuity=None):
        super().__init__(message)
        self.date = date
        self.option_type = option_type
        self.strike = strike
        self.forward = forward
        self.price = price
        self.annuity = annuity
