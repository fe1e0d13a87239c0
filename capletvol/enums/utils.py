# -*- coding: utf-8 -*-
from enum import Enum
import numpy as np
import pandas as pd
from capletvol.enums.helper import is_valid_enum_value, get_enum_member


class DayCountBasis(Enum):
    _30_360 = '30/360'
    _30E_360 = '30e/360'
    ACT_360 = 'act/360'
    ACT_365 = 'act/365'
    ACT_ACT = 'act/act'

    def __init__(self, value):
        days_per_year = {
            '30/360': 360,
            '30e/360': 360,
            'act/360': 360,
            'act/365': 365,
            'act/act': np.nan,
            }
        self.days_per_year = days_per_year[self.value]

    @classmethod
    def default(cls):
        return cls.ACT_365 # Return the default enum value

    @staticmethod
    def _transform_value(value: str) -> str:
        value = value.replace('actual','act')
        if value in {'act/365fixed', 'act/365f'}:
            value = 'act/365'
        return value

    @classmethod
    def is_valid(cls, value):
        return is_valid_enum_value(cls, value, cls._transform_value)

    @classmethod
    def from_value(cls, value):
        """Create an enum member from the given value, if valid."""
        return get_enum_member(cls, value, cls._transform_value)

    @property
    def display_name(self):
        return self.value.upper().replace('_', ' ').strip()


class CompoundingFreq(Enum):
    SIMPLE = 'simple'
    CONTINUOUS = 'continuous'
    DAILY = 'daily'
    MONTHLY = 'monthly'
    QUARTERLY = 'quarterly'
    SEMIANNUAL = 'semiannual'
    ANNUAL = 'annual'

    def __init__(self, value):
        periods_per_year_map = {
            'simple': None,
            'continuous': None,
            'daily': 365,
            'monthly': 12,
            'quarterly': 4,
            'semiannual': 2,
            'annual': 1
            }
        self.periods_per_year = periods_per_year_map[self.value]

    @classmethod
    def default(cls):
        return cls.CONTINUOUS

    @classmethod
    def is_valid(cls, value):
        return is_valid_enum_value(cls, value)

    @classmethod
    def from_value(cls, value):
        return get_enum_member(cls, value)

    @property
    def display_name(self):
        return self.name.title().replace('_', ' ').strip()


class RollConv(Enum):
    UNADJUSTED = 'unadjusted'
    FOLLOWING = 'following'
    PRECEDING = 'preceding'
    MODIFIED_FOLLOWING = 'modifiedfollowing'
    MODIFIED_PRECEDING = 'modifiedpreceding'

    @classmethod
    def is_valid(cls, value):
        return is_valid_enum_value(cls, value, lambda v: v.replace('_', ''))

    @classmethod
    def from_value(cls, value):
        return get_enum_member(cls, value, lambda v: v.replace('_', ''))

    @classmethod
    def default(cls):
        return cls.MODIFIED_FOLLOWING # Return the default enum value

    def roll(self, dates, cal: np.busdaycalendar=np.busdaycalendar()):
        """Roll dates onto business days of 'cal' per this convention."""
        dates_np = pd.DatetimeIndex(np.atleast_1d(dates)).to_numpy().astype('datetime64[D]')
        if self == RollConv.UNADJUSTED:
            rolled = dates_np
        else:
            rolled = np.busday_offset(dates_np, offsets=0, roll=self.value, busdaycal=cal)
        return pd.DatetimeIndex(rolled)

    @property
    def display_name(self):
        return self.name.replace('_', ' ').title()
