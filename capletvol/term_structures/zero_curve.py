# -*- coding: utf-8 -*-
import datetime as dt
import logging
from dataclasses import dataclass, InitVar
from typing import Optional, Union
import numpy as np
import pandas as pd
from capletvol.enums import DayCountBasis, CompoundingFreq, TermRate
from capletvol.utils.daycount import year_frac
from capletvol.utils.tenor import Tenor
from capletvol.utils.observable import Observable
from capletvol.term_structures.zero_curve_helpers import zero_rate_from_discount_factor, discount_factor_from_zero_rate


DateLike = Union[pd.Timestamp, np.datetime64, dt.datetime, dt.date, pd.Series, pd.DatetimeIndex, list]


@dataclass(eq=False)
class ZeroCurve(Observable):
    """
    Zero coupon curve, linearly interpolated on the log of discount factors.

    'pillar_df' has exactly two columns:
    (i) One of: 'tenor', 'date', 'years'
    (ii) One of: 'discount_factor', 'zero_rate' (the latter requires 'compounding_freq')
    """
    # Required inputs
    curve_date: pd.Timestamp
    pillar_df: pd.DataFrame

    # Used in the __post_init__ but not set as attributes
    compounding_freq: InitVar[CompoundingFreq]=None

    # Optional init inputs
    day_count_basis: DayCountBasis=DayCountBasis.ACT_365
    cal: np.busdaycalendar=np.busdaycalendar()
    extrap_method: str='flat'

    def __post_init__(self, compounding_freq):
        Observable.__init__(self)
        self.curve_date = pd.Timestamp(self.curve_date)
        if self.extrap_method not in {'none', 'flat'}:
            raise ValueError(f"Invalid extrapolation method {self.extrap_method}")
        self.pillar_df = self._process_pillar_df(self.pillar_df.copy(), compounding_freq)

    def _process_pillar_df(self, pillar_df, compounding_freq):

        only_one_of_columns_X = ['tenor', 'date', 'years']
        only_one_of_columns_Y = ['zero_rate', 'discount_factor']

        if len(pillar_df.columns.to_list()) != 2:
            raise ValueError('Exactly two columns must be specified: \n'
                             '(i) One of: ' + ', '.join(only_one_of_columns_X) + '\n'
                             '(ii) One of: ' + ', '.join(only_one_of_columns_Y))

        X_columns = [col for col in only_one_of_columns_X if col in pillar_df.columns]
        if len(X_columns) != 1:
            raise ValueError('Exactly one of the following columns must be specified: ' + ', '.join(only_one_of_columns_X))
        X_column_name = X_columns[0]

        Y_columns = [col for col in only_one_of_columns_Y if col in pillar_df.columns]
        if len(Y_columns) != 1:
            raise ValueError('Exactly one of the following columns must be specified: ' + ', '.join(only_one_of_columns_Y))
        Y_column_name = Y_columns[0]

        if Y_column_name == 'zero_rate' and compounding_freq is None:
            raise ValueError("'compounding_freq' must be specified for zero rates specified in 'pillar_df'")
        if compounding_freq is not None:
            compounding_freq = CompoundingFreq.from_value(compounding_freq)

        match X_column_name:
            case 'tenor':
                dates = [self.curve_date + Tenor.from_value(tenor).date_offset for tenor in pillar_df['tenor']]
                dates_np = pd.DatetimeIndex(dates).to_numpy().astype('datetime64[D]')
                pillar_df['date'] = pd.DatetimeIndex(np.busday_offset(dates_np, offsets=0, roll='following', busdaycal=self.cal))
                pillar_df['years'] = np.atleast_1d(year_frac(self.curve_date, pillar_df['date'], self.day_count_basis))
            case 'date':
                pillar_df['date'] = pd.to_datetime(pillar_df['date'])
                pillar_df['years'] = np.atleast_1d(year_frac(self.curve_date, pillar_df['date'], self.day_count_basis))
            case 'years':
                pass

        pillar_df = pillar_df.sort_values(by='years', ascending=True).reset_index(drop=True)
        pillar_df = pillar_df[pillar_df['years'] > 0].reset_index(drop=True)
        if pillar_df.empty:
            raise ValueError("'pillar_df' must have at least one pillar after the curve date")

        if Y_column_name == 'zero_rate':
            pillar_df['discount_factor'] = discount_factor_from_zero_rate(
                years=pillar_df['years'],
                zero_rate=pillar_df['zero_rate'],
                compounding_freq=compounding_freq)
            pillar_df.drop(columns=['zero_rate'], inplace=True)

        if (pillar_df['discount_factor'] <= 0).any():
            raise ValueError("Discount factors must be positive")

        # Continuously compounded zero rate for internal use
        pillar_df['cczr'] = -1 * np.log(pillar_df['discount_factor']) / pillar_df['years']

        column_order = ['tenor', 'date', 'years', 'cczr', 'discount_factor']
        return pillar_df[[col for col in column_order if col in pillar_df.columns]]

    def set_pillars(self, pillar_df: pd.DataFrame, compounding_freq: Optional[CompoundingFreq]=None):
        """Replace the curve pillars (e.g. on a market data update) and notify observers."""
        self.pillar_df = self._process_pillar_df(pillar_df.copy(), compounding_freq)
        self.notify_observers()

    def flat_shift(self, basis_points: float=1) -> 'ZeroCurve':
        shifted = pd.DataFrame({'years': self.pillar_df['years'],
                                'zero_rate': self.pillar_df['cczr'] + basis_points / 10000})
        return ZeroCurve(curve_date=self.curve_date,
                         pillar_df=shifted,
                         compounding_freq=CompoundingFreq.CONTINUOUS,
                         day_count_basis=self.day_count_basis,
                         cal=self.cal,
                         extrap_method=self.extrap_method)

    def _dates_to_years(self, dates: DateLike) -> np.ndarray:
        dates = pd.DatetimeIndex(np.atleast_1d(pd.to_datetime(dates)))
        if (dates < self.curve_date).any():
            raise ValueError(f"Dates before the curve date {self.curve_date.date()} are not supported")
        return np.atleast_1d(year_frac(self.curve_date, dates, self.day_count_basis))

    def get_discount_factors(self,
                             dates: Optional[DateLike]=None,
                             years: Optional[Union[float, np.ndarray, pd.Series]]=None) -> np.ndarray:
        if (dates is None) == (years is None):
            raise ValueError('Exactly one of dates or years must be specified.')

        years = self._dates_to_years(dates) if dates is not None else np.atleast_1d(np.asarray(years, dtype='float64'))

        xp = np.concatenate([[0.0], self.pillar_df['years'].values])
        fp = np.concatenate([[0.0], np.log(self.pillar_df['discount_factor'].values)])
        ln_df_interp = np.interp(x=years, xp=xp, fp=fp)

        above_range = years > xp[-1]
        if above_range.any():
            if self.extrap_method == 'none':
                logging.error(f"years {years[above_range]} are above the last pillar {xp[-1]}")
                raise ValueError(f"years {years[above_range]} are above the last pillar {xp[-1]} and 'extrap_method' is 'none'")
            # Flat extrapolation of the continuously compounded zero rate
            ln_df_interp[above_range] = -1 * self.pillar_df['cczr'].values[-1] * years[above_range]

        return np.exp(ln_df_interp)

    def get_zero_rates(self,
                       compounding_freq: CompoundingFreq,
                       dates: Optional[DateLike]=None,
                       years: Optional[Union[float, np.ndarray, pd.Series]]=None) -> np.ndarray:
        if dates is not None:
            years = self._dates_to_years(dates)
        years = np.atleast_1d(np.asarray(years, dtype='float64'))
        discount_factor = self.get_discount_factors(years=years)
        return zero_rate_from_discount_factor(years=years, discount_factor=discount_factor, compounding_freq=compounding_freq)

    def get_forward_rates(self,
                          period_start: DateLike,
                          period_end: DateLike,
                          forward_rate_type: TermRate=TermRate.SIMPLE,
                          day_count_basis: Optional[DayCountBasis]=None) -> np.ndarray:
        """Forward rates over [period_start, period_end], accruing per 'day_count_basis' (defaults to the curve's)."""
        period_start = pd.DatetimeIndex(np.atleast_1d(pd.to_datetime(period_start)))
        period_end = pd.DatetimeIndex(np.atleast_1d(pd.to_datetime(period_end)))

        if len(period_start) != len(period_end):
            raise ValueError("'period_start' and 'period_end' must have the same length")
        if not (period_end > period_start).all():
            raise ValueError("'period_end' must be after 'period_start'")

        day_count_basis = self.day_count_basis if day_count_basis is None else day_count_basis
        Δt = np.atleast_1d(year_frac(period_start, period_end, day_count_basis))
        DF_t1 = self.get_discount_factors(dates=period_start)
        DF_t2 = self.get_discount_factors(dates=period_end)

        # https://en.wikipedia.org/wiki/Forward_rate
        if forward_rate_type == TermRate.SIMPLE:
            return (1.0 / Δt) * (DF_t1 / DF_t2 - 1.0)
        elif forward_rate_type == TermRate.CONTINUOUS:
            return (1.0 / Δt) * (np.log(DF_t1) - np.log(DF_t2))
        elif forward_rate_type == TermRate.ANNUAL:
            return (DF_t1 / DF_t2) ** (1.0 / Δt) - 1.0
        else:
            raise ValueError(f"Invalid forward_rate_type {forward_rate_type}")
