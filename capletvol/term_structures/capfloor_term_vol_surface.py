# -*- coding: utf-8 -*-
import logging
import re
from typing import Union, List
import numpy as np
import pandas as pd
from capletvol.enums import DayCountBasis
from capletvol.errors import CapletVolConfigError
from capletvol.utils.daycount import year_frac
from capletvol.utils.tenor import Tenor
from capletvol.utils.observable import Observable


def parse_strike_col_name(col_name) -> float:
    """Absolute strike of a quote column; 0.025, '2.5%' and '250bps' are all 2.5%."""
    if isinstance(col_name, (int, float, np.number)):
        return float(col_name)

    bps_quote = r'^[+-]?\d+(\.\d+)?(bps|bp)$'
    percentage_quote = r'^[+-]?\d+(\.\d+)?%$'
    value = col_name.lower().replace(' ', '')
    if re.search(bps_quote, value):
        return round(float(value.replace('bps', '').replace('bp', '')) / 10000, 10)
    elif re.search(percentage_quote, value):
        return round(float(value.replace('%', '')) / 100, 10)
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Invalid strike column name: {col_name}")


class CapFloorTermVolSurface(Observable):
    """
    Flat (term) lognormal volatilities of caps/floors, quoted per cap/floor tenor and absolute strike.

    'quote_vol_sln' has a 'tenor' column (e.g. '1Y', '18M') and one column per strike (e.g. '2.5%', 0.03).
    Volatilities are linearly interpolated in strike and in time to the cap/floor maturity
    (measured from the reference date per 'day_count_basis').
    """

    def __init__(self,
                 reference_date: pd.Timestamp,
                 quote_vol_sln: pd.DataFrame,
                 day_count_basis: DayCountBasis=DayCountBasis.ACT_365):
        super().__init__()
        self._reference_date = pd.Timestamp(reference_date)
        self._day_count_basis = DayCountBasis.from_value(day_count_basis)
        self._process_quotes(quote_vol_sln)

    def _process_quotes(self, quote_vol_sln: pd.DataFrame):
        if 'tenor' not in quote_vol_sln.columns:
            raise ValueError("'quote_vol_sln' must have a 'tenor' column")
        quote_cols = [col for col in quote_vol_sln.columns if col != 'tenor']
        if len(quote_cols) == 0:
            raise ValueError("'quote_vol_sln' must have at least one strike column")
        if len(quote_vol_sln) == 0:
            raise ValueError("'quote_vol_sln' must have at least one tenor")

        strikes = np.array([parse_strike_col_name(col) for col in quote_cols])
        order = np.argsort(strikes)
        if len(np.unique(strikes)) != len(strikes):
            raise ValueError(f"Duplicate strikes in 'quote_vol_sln': {strikes}")

        tenors = [Tenor.from_value(tenor) for tenor in quote_vol_sln['tenor']]
        vols = quote_vol_sln[quote_cols].astype('float64').values[:, order]
        if np.isnan(vols).any() or (vols < 0).any():
            logging.error("'quote_vol_sln' volatilities must be non-negative and non-missing")
            raise ValueError("'quote_vol_sln' volatilities must be non-negative and non-missing")

        tenor_order = sorted(range(len(tenors)), key=lambda i: tenors[i])
        self._option_tenors = [tenors[i] for i in tenor_order]
        if len(set(self._option_tenors)) != len(self._option_tenors):
            raise ValueError(f"Duplicate tenors in 'quote_vol_sln': {[t.name for t in self._option_tenors]}")
        self._strikes = strikes[order]
        self._vols = vols[tenor_order, :]
        self._option_times = np.array([self.tenor_to_years(tenor) for tenor in self._option_tenors])

    def set_vols(self, quote_vol_sln: pd.DataFrame):
        """
        Replace the quotes (e.g. on a market data update) and notify observers.

        While observers are registered the number of strikes and the maximum tenor are fixed,
        as observers size their grids from them. Quotes which change either are rejected and
        the current quotes are kept.
        """
        previous_state = (self._option_tenors, self._strikes, self._vols, self._option_times)
        try:
            self._process_quotes(quote_vol_sln)
        except ValueError:
            self._option_tenors, self._strikes, self._vols, self._option_times = previous_state
            raise
        if len(self._observers) > 0 and (len(self._strikes) != len(previous_state[1])
                                         or self.max_tenor() != previous_state[0][-1]):
            new_shape = f"{len(self._strikes)} strikes to {self.max_tenor().name}"
            self._option_tenors, self._strikes, self._vols, self._option_times = previous_state
            logging.error(f"quotes of {new_shape} rejected by an observed surface of "
                          f"{len(self._strikes)} strikes to {self.max_tenor().name}")
            raise CapletVolConfigError(f"The number of strikes and the maximum tenor of an observed surface are fixed. "
                                       f"Instead the quotes have {new_shape}")
        self.notify_observers()

    def reference_date(self) -> pd.Timestamp:
        return self._reference_date

    def day_count_basis(self) -> DayCountBasis:
        return self._day_count_basis

    def strikes(self) -> np.ndarray:
        return self._strikes.copy()

    def option_tenors(self) -> List[Tenor]:
        return list(self._option_tenors)

    def max_tenor(self) -> Tenor:
        return self._option_tenors[-1]

    def quotes(self) -> pd.DataFrame:
        df = pd.DataFrame(self._vols, columns=self._strikes)
        df.insert(loc=0, column='tenor', value=[tenor.name for tenor in self._option_tenors])
        return df

    def tenor_to_years(self, tenor: Union[Tenor, str]) -> float:
        tenor = Tenor.from_value(tenor)
        return year_frac(self._reference_date, self._reference_date + tenor.date_offset, self._day_count_basis)

    def volatility(self,
                   tenor: Union[Tenor, str, float],
                   strike: float,
                   extrapolate: bool=False) -> float:
        """Flat volatility for a cap/floor of maturity 'tenor' (a tenor or years from the reference date) and 'strike'."""
        years = float(tenor) if isinstance(tenor, (int, float, np.number)) else self.tenor_to_years(tenor)

        if not extrapolate:
            if not (self._option_times[0] <= years <= self._option_times[-1]):
                raise ValueError(f"time {years} is outside the surface time range "
                                 f"[{self._option_times[0]}, {self._option_times[-1]}] and 'extrapolate' is False")
            if not (self._strikes[0] <= strike <= self._strikes[-1]):
                raise ValueError(f"strike {strike} is outside the surface strike range "
                                 f"[{self._strikes[0]}, {self._strikes[-1]}] and 'extrapolate' is False")

        # Linear in strike per quoted tenor, then linear in time. np.interp is flat outside the grid.
        vols_for_strike = np.array([np.interp(strike, self._strikes, row) for row in self._vols])
        return float(np.interp(years, self._option_times, vols_for_strike))

    def __repr__(self):
        return (f"CapFloorTermVolSurface(reference_date={self._reference_date.date()}, "
                f"tenors={[t.name for t in self._option_tenors]}, strikes={list(self._strikes)})")
