# -*- coding: utf-8 -*-
import datetime as dt
import pandas as pd
from capletvol.enums import DayCountBasis
from capletvol.utils.observable import Observable


# Optionlet stripping
DEFAULT_SWITCH_STRIKE = 0.04 # Strikes below the switch strike are stripped from floors, otherwise from caps
OPTIONLET_STD_DEV_FIRST_GUESS = 0.14 # Initial Black76 standard deviation guess for each optionlet
STD_DEV_BOUNDS = (1e-8, 10.0) # Admissible Black76 standard deviations (vol * sqrt(t))
IMPLIED_STD_DEV_XTOL = 1e-12
IMPLIED_STD_DEV_MAX_ITER = 100

# Day count basis
DEFAULT_DAY_COUNT_BASIS = DayCountBasis.ACT_365 # For option expiry year fractions

# Term rate indices
DEFAULT_FIXING_DAYS = 2


class Settings(Observable):
    """Global settings. Observers registered with the settings are notified when the evaluation date changes."""

    def __init__(self):
        super().__init__()
        self._evaluation_date = None

    @property
    def evaluation_date(self) -> pd.Timestamp:
        if self._evaluation_date is None:
            return pd.Timestamp(dt.date.today())
        return self._evaluation_date

    @evaluation_date.setter
    def evaluation_date(self, date):
        date = pd.Timestamp(date).normalize() if date is not None else None
        if date != self._evaluation_date:
            self._evaluation_date = date
            self.notify_observers()


settings = Settings()
