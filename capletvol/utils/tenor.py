# -*- coding: utf-8 -*-
import re
import unicodedata
import logging
from dataclasses import dataclass
from functools import total_ordering
import pandas as pd
from pandas import DateOffset


DAYS_PER_MONTH = 365 / 12


def clean_tenor(tenor: str) -> str:
    if not isinstance(tenor, str):
        raise TypeError(f"'tenor' {tenor} must be a string. Instead is type {type(tenor)}")

    tenor = unicodedata.normalize('NFKD', tenor)
    tenor = tenor.lower().replace(' ','').replace('/','').replace('\n', '').replace('\r', '')

    replacements = {
        'd': ['days', 'day'],
        'w': ['weeks', 'week'],
        'm': ['months', 'month', 'mon'],
        'y': ['years', 'year', 'yrs', 'yr'],
    }

    pattern = re.compile('|'.join(map(re.escape, [val for sublist in replacements.values() for val in sublist])))
    tenor = pattern.sub(lambda match: next(k for k, v in replacements.items() if match.group(0) in v), tenor)

    return tenor


def tenor_to_date_offset(tenor: str) -> pd.DateOffset:
    if not isinstance(tenor, str):
        raise TypeError("'tenor' must be a string")

    # Identity tenors specified in integer days only; 1D, 30D , 360D
    if re.search(r'^\d+d$', tenor) is not None:
        offset = DateOffset(days=int(tenor[:-1]))
    # Identity tenors specified in integer weeks only; 1W, 52W, 104W
    elif re.search(r'^\d+w$', tenor) is not None:
        offset = DateOffset(weeks=int(tenor[:-1]))
    # Identity tenors specified in integer months only; 1M, 12M, 120M
    elif re.search(r'^\d+m$', tenor) is not None:
        offset = DateOffset(months=int(tenor[:-1]))
    # Identity tenors specified in integer years only; 1Y, 10Y, 100Y
    elif re.search(r'^\d+y$', tenor) is not None:
        offset = DateOffset(years=int(tenor[:-1]))
    # Identity tenors specified in integer years and integer monthly only; 1Y3M, 10Y6M, 100Y1M
    elif re.search(r'^\d+y\d+m$', tenor) is not None:
        years, months = tenor[:-1].split('y')
        offset = DateOffset(months=int(years) * 12 + int(months))
    else:
        logging.error(f"invalid 'tenor' value: {tenor}")
        raise ValueError(f"invalid 'tenor' value: {tenor}")

    return offset


@total_ordering
@dataclass(frozen=True)
class Tenor:
    """
    A period such as 3M or 2Y.

    Month and year tenors are held in months, day and week tenors in days, so that
    Tenor('1y') == Tenor('12m') and the ladder 3M + 3M + ... stays exact.
    """
    length: int
    unit: str  # 'd' or 'm'

    def __post_init__(self):
        if self.unit not in {'d', 'm'}:
            raise ValueError(f"Invalid tenor unit '{self.unit}'. Must be 'd' or 'm'.")
        if self.length < 0:
            raise ValueError(f"Tenor length must be non-negative. Instead is {self.length}")

    @classmethod
    def from_value(cls, value):
        if isinstance(value, Tenor):
            return value
        tenor = clean_tenor(value)
        if re.search(r'^\d+d$', tenor) is not None:
            return cls(int(tenor[:-1]), 'd')
        elif re.search(r'^\d+w$', tenor) is not None:
            return cls(7 * int(tenor[:-1]), 'd')
        elif re.search(r'^\d+m$', tenor) is not None:
            return cls(int(tenor[:-1]), 'm')
        elif re.search(r'^\d+y$', tenor) is not None:
            return cls(12 * int(tenor[:-1]), 'm')
        elif re.search(r'^\d+y\d+m$', tenor) is not None:
            years, months = tenor[:-1].split('y')
            return cls(int(years) * 12 + int(months), 'm')
        logging.error(f"invalid 'tenor' value: {value}")
        raise ValueError(f"invalid 'tenor' value: {value}")

    @property
    def date_offset(self) -> pd.DateOffset:
        if self.unit == 'm':
            return DateOffset(months=self.length)
        return DateOffset(days=self.length)

    @property
    def approx_days(self) -> float:
        return self.length * DAYS_PER_MONTH if self.unit == 'm' else float(self.length)

    @property
    def name(self) -> str:
        if self.unit == 'm':
            years, months = divmod(self.length, 12)
            if months == 0 and years > 0:
                return f'{years}y'
            return f'{self.length}m'
        if self.length % 7 == 0 and self.length > 0:
            return f'{self.length // 7}w'
        return f'{self.length}d'

    def __add__(self, other):
        other = Tenor.from_value(other)
        if self.unit != other.unit:
            raise ValueError(f"Cannot add tenors {self.name} and {other.name} with different units")
        return Tenor(self.length + other.length, self.unit)

    def __mul__(self, factor: int):
        if not isinstance(factor, int):
            return NotImplemented
        return Tenor(self.length * factor, self.unit)

    __rmul__ = __mul__

    def __lt__(self, other):
        other = Tenor.from_value(other)
        if self.unit == other.unit:
            return self.length < other.length
        return self.approx_days < other.approx_days

    def __eq__(self, other):
        if isinstance(other, str):
            other = Tenor.from_value(other)
        if not isinstance(other, Tenor):
            return NotImplemented
        if self.unit == other.unit:
            return self.length == other.length
        return self.length == 0 and other.length == 0

    def __hash__(self):
        return hash((self.length, self.unit)) if self.length else hash(0)

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Tenor('{self.name}')"
