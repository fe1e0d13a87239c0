# -*- coding: utf-8 -*-
import os
if __name__ == "__main__":
    os.chdir(os.environ.get('PROJECT_DIR_CAPLETVOL'))

import logging
import threading
import time
from typing import List, Optional, Sequence, Tuple, Union
import numpy as np
import pandas as pd
from capletvol.enums import CapFloorType
from capletvol.errors import CapletVolConfigError, ImpliedVolatilityError, OptionletBootstrapError
from capletvol.indices.term_rate_index import TermRateIndex
from capletvol.instruments.ir.capfloor import CapFloor, make_capfloor
from capletvol.pricing_engine.black76 import black76_solve_implied_std_dev
from capletvol.pricing_engine.black_capfloor_engine import BlackCapFloorEngine
from capletvol.term_structures.capfloor_term_vol_surface import CapFloorTermVolSurface
from capletvol.utils.daycount import year_frac
from capletvol.utils.observable import Observer
from capletvol.utils.settings import settings, DEFAULT_SWITCH_STRIKE, OPTIONLET_STD_DEV_FIRST_GUESS
from capletvol.utils.tenor import Tenor


logger = logging.getLogger(__name__)

GRID_NAMES = ('capfloor_prices', 'optionlet_prices', 'capfloor_vols', 'optionlet_vols', 'optionlet_std_devs')

# Strike of the cap used only to read the optionlet dates and accruals off its schedule
DUMMY_STRIKE = 0.04
DUMMY_VOL_SLN = 0.20


def build_optionlet_tenor_grid(index_tenor: Union[Tenor, str],
                               max_tenor: Union[Tenor, str]) -> Tuple[List[Tenor], List[Tenor]]:
    """
    Optionlet tenors (τ, 2τ, ...) and the cap/floor lengths (2τ, 3τ, ...) they are stripped from.

    Lengths are extended by one index tenor while they do not exceed 'max_tenor'.
    """
    index_tenor, max_tenor = Tenor.from_value(index_tenor), Tenor.from_value(max_tenor)
    if index_tenor.length <= 0:
        raise CapletVolConfigError(f"Index tenor must be positive. Instead is {index_tenor}")

    optionlet_tenors = [index_tenor]
    capfloor_lengths = [optionlet_tenors[-1] + index_tenor]
    if capfloor_lengths[-1] > max_tenor:
        logging.error(f"too short capfloor term vol surface: max tenor {max_tenor.name} < {capfloor_lengths[-1].name}")
        raise CapletVolConfigError(f"too short capfloor term vol surface: the maximum tenor ({max_tenor.name}) "
                                   f"is shorter than two index tenors ({capfloor_lengths[-1].name})")
    while capfloor_lengths[-1] + index_tenor <= max_tenor:
        optionlet_tenors.append(optionlet_tenors[-1] + index_tenor)
        capfloor_lengths.append(optionlet_tenors[-1] + index_tenor)
    return optionlet_tenors, capfloor_lengths


def normalise_switch_strikes(switch_strikes: Optional[Union[float, Sequence[float]]], n: int) -> np.ndarray:
    """One switch strike per optionlet tenor: none defaults to DEFAULT_SWITCH_STRIKE, a single value is broadcast."""
    if switch_strikes is None:
        return np.full(n, DEFAULT_SWITCH_STRIKE)
    switch_strikes = np.atleast_1d(np.asarray(switch_strikes, dtype='float64'))
    if len(switch_strikes) == 0:
        return np.full(n, DEFAULT_SWITCH_STRIKE)
    if len(switch_strikes) == 1:
        return np.full(n, switch_strikes[0])
    if len(switch_strikes) != n:
        logging.error(f"{len(switch_strikes)} switch strikes were given for {n} optionlet tenors")
        raise CapletVolConfigError(f"The number of switch strikes ({len(switch_strikes)}) "
                                   f"must be 1 or the number of optionlet tenors ({n})")
    return switch_strikes


def difference_cumulative_prices(capfloor_prices: np.ndarray) -> np.ndarray:
    """Optionlet prices from the prices of cap/floors of increasing length, per strike (column)."""
    capfloor_prices = np.asarray(capfloor_prices, dtype='float64')
    return np.diff(capfloor_prices, axis=0, prepend=np.zeros((1, capfloor_prices.shape[1])))


class OptionletStripper(Observer):
    """
    Strips optionlet (caplet/floorlet) volatilities from a cap/floor term volatility surface.

    Optionlet i is the last optionlet of the cap/floor of length capfloor_lengths[i]. Its price is the
    difference between the prices of the cap/floors of length capfloor_lengths[i] and capfloor_lengths[i-1],
    each priced with the flat volatility read off the surface. Out-of-the-money instruments are used:
    floors for strikes below the switch strike of the optionlet tenor, caps otherwise.

    The results are computed lazily on the first read, and again on the first read after the surface,
    the index or the evaluation date changed. The implied standard deviations of a successful pass
    are the initial guesses of the next pass. A notification received during a pass leaves the results
    stale, so the next read strips again.

    The grid shape is fixed at construction: the number of surface strikes and the surface's maximum
    tenor must not change while the stripper observes the surface.
    """

    def __init__(self,
                 surface: CapFloorTermVolSurface,
                 index: TermRateIndex,
                 switch_strikes: Optional[Union[float, Sequence[float]]]=None):
        super().__init__()
        self._surface = surface
        self._index = index
        self._lock = threading.RLock()
        # Guards the notification count, not held during a pass
        self._update_lock = threading.Lock()
        self._nb_updates = 0
        self._fresh = False

        self.register_with(surface)
        self.register_with(index)
        self.register_with(settings)

        self._optionlet_tenors, self._capfloor_lengths = build_optionlet_tenor_grid(index.tenor(), surface.max_tenor())
        n = len(self._optionlet_tenors)
        self._switch_strikes = normalise_switch_strikes(switch_strikes, n)
        self._nb_strikes = len(surface.strikes())

        # Initial guesses, overwritten by each successful pass
        self._optionlet_std_devs = np.full((n, self._nb_strikes), OPTIONLET_STD_DEV_FIRST_GUESS)
        self._reset_results()

    def _reset_results(self):
        n, m = len(self._optionlet_tenors), self._nb_strikes
        self._capfloor_prices = np.full((n, m), np.nan)
        self._optionlet_prices = np.full((n, m), np.nan)
        self._capfloor_vols = np.full((n, m), np.nan)
        self._optionlet_vols = np.full((n, m), np.nan)
        self._optionlet_dates = [pd.NaT] * n
        self._optionlet_payment_dates = [pd.NaT] * n
        self._optionlet_times = np.full(n, np.nan)
        self._optionlet_accrual_periods = np.full(n, np.nan)
        self._atm_optionlet_rates = np.full(n, np.nan)
        self._capfloors = [[None] * m for _ in range(n)]

    def update(self):
        with self._update_lock:
            self._nb_updates += 1
            self._fresh = False

    def is_fresh(self) -> bool:
        return self._fresh

    def calculate(self):
        """Run the stripping pass if the results are stale."""
        if self._fresh:
            return
        with self._lock:
            if self._fresh:
                return
            with self._update_lock:
                nb_updates = self._nb_updates
            t1 = time.time()
            try:
                self._perform_calculations()
            except Exception:
                self._reset_results()
                raise
            with self._update_lock:
                # Stale if notified during the pass
                self._fresh = self._nb_updates == nb_updates
            t2 = time.time()
            logger.debug(f"stripped {len(self._optionlet_tenors)}x{self._nb_strikes} optionlets in {round(t2 - t1, 3)}s")

    def _perform_calculations(self):
        surface, index = self._surface, self._index
        reference_date = surface.reference_date()
        day_count_basis = surface.day_count_basis()
        strikes = surface.strikes()
        if len(strikes) != self._nb_strikes:
            raise CapletVolConfigError(f"The number of surface strikes changed from {self._nb_strikes} to {len(strikes)}")
        n, m = len(self._optionlet_tenors), self._nb_strikes

        self._reset_results()
        std_devs = self._optionlet_std_devs.copy()

        for i, capfloor_length in enumerate(self._capfloor_lengths):
            engine = BlackCapFloorEngine(DUMMY_VOL_SLN, day_count_basis, reference_date=reference_date)
            capfloor = make_capfloor(CapFloorType.CAP, capfloor_length, index, DUMMY_STRIKE, 0, engine)
            self._optionlet_dates[i] = capfloor.last_fixing_date()
            self._optionlet_payment_dates[i] = capfloor.last_payment_date()
            self._optionlet_accrual_periods[i] = capfloor.last_accrual_period()
            self._optionlet_times[i] = year_frac(reference_date, self._optionlet_dates[i], day_count_basis)
            self._atm_optionlet_rates[i] = index.forecast_fixing(self._optionlet_dates[i])

        for j, strike in enumerate(strikes):
            previous_capfloor_price = 0.0
            for i, capfloor_length in enumerate(self._capfloor_lengths):
                capfloor_type = CapFloorType.from_switch_strike(strike, self._switch_strikes[i])
                option_type = capfloor_type.option_type

                self._capfloor_vols[i, j] = surface.volatility(capfloor_length, strike, extrapolate=True)
                engine = BlackCapFloorEngine(self._capfloor_vols[i, j], day_count_basis, reference_date=reference_date)
                capfloor = make_capfloor(capfloor_type, capfloor_length, index, strike, 0, engine)
                self._capfloors[i][j] = capfloor
                self._capfloor_prices[i, j] = capfloor.npv()
                self._optionlet_prices[i, j] = self._capfloor_prices[i, j] - previous_capfloor_price
                previous_capfloor_price = self._capfloor_prices[i, j]

                discount_factor = capfloor.discount_curve().get_discount_factors(
                    dates=self._optionlet_payment_dates[i]).item()
                annuity = self._optionlet_accrual_periods[i] * discount_factor
                try:
                    std_devs[i, j] = black76_solve_implied_std_dev(cp=option_type.cp,
                                                                   K=strike,
                                                                   F=self._atm_optionlet_rates[i],
                                                                   X=self._optionlet_prices[i, j],
                                                                   annuity_factor=annuity,
                                                                   std_dev_guess=std_devs[i, j])
                except ImpliedVolatilityError as e:
                    message = (f"could not bootstrap the optionlet:"
                               f"\n date: {self._optionlet_dates[i].date()}"
                               f"\n type: {option_type.display_name}"
                               f"\n strike: {strike:.4%}"
                               f"\n atm: {self._atm_optionlet_rates[i]:.4%}"
                               f"\n price: {self._optionlet_prices[i, j]}"
                               f"\n annuity: {annuity}"
                               f"\n error message: {e}")
                    logger.error(message)
                    raise OptionletBootstrapError(message,
                                                  date=self._optionlet_dates[i],
                                                  option_type=option_type,
                                                  strike=strike,
                                                  forward=self._atm_optionlet_rates[i],
                                                  price=self._optionlet_prices[i, j],
                                                  annuity=annuity) from e
                self._optionlet_vols[i, j] = std_devs[i, j] / np.sqrt(self._optionlet_times[i])

        self._optionlet_std_devs = std_devs

    # Inputs and the tenor grid, available without a stripping pass

    def surface(self) -> CapFloorTermVolSurface:
        return self._surface

    def index(self) -> TermRateIndex:
        return self._index

    def strikes(self) -> np.ndarray:
        return self._surface.strikes()

    def optionlet_tenors(self) -> List[Tenor]:
        return list(self._optionlet_tenors)

    def capfloor_lengths(self) -> List[Tenor]:
        return list(self._capfloor_lengths)

    def switch_strikes(self) -> np.ndarray:
        return self._switch_strikes.copy()

    # Results of the stripping pass

    def optionlet_dates(self) -> List[pd.Timestamp]:
        self.calculate()
        return list(self._optionlet_dates)

    def optionlet_payment_dates(self) -> List[pd.Timestamp]:
        self.calculate()
        return list(self._optionlet_payment_dates)

    def optionlet_times(self) -> np.ndarray:
        self.calculate()
        return self._optionlet_times.copy()

    def optionlet_accrual_periods(self) -> np.ndarray:
        self.calculate()
        return self._optionlet_accrual_periods.copy()

    def atm_optionlet_rates(self) -> np.ndarray:
        self.calculate()
        return self._atm_optionlet_rates.copy()

    def capfloor_prices(self) -> np.ndarray:
        self.calculate()
        return self._capfloor_prices.copy()

    def optionlet_prices(self) -> np.ndarray:
        self.calculate()
        return self._optionlet_prices.copy()

    def capfloor_vols(self) -> np.ndarray:
        self.calculate()
        return self._capfloor_vols.copy()

    def optionlet_vols(self) -> np.ndarray:
        self.calculate()
        return self._optionlet_vols.copy()

    def optionlet_std_devs(self) -> np.ndarray:
        self.calculate()
        return self._optionlet_std_devs.copy()

    def capfloors(self) -> List[List[CapFloor]]:
        self.calculate()
        return [list(row) for row in self._capfloors]

    def to_frame(self, grid: Union[str, np.ndarray]='optionlet_vols') -> pd.DataFrame:
        """A result grid (by name, e.g. 'optionlet_vols', or as an array) indexed by optionlet tenor, with strike columns."""
        if isinstance(grid, str):
            if grid not in GRID_NAMES:
                raise ValueError(f"Invalid grid '{grid}'. Must be one of {GRID_NAMES}")
            values = getattr(self, grid)()
        else:
            values = np.asarray(grid)
            if values.shape != (len(self._optionlet_tenors), self._nb_strikes):
                raise ValueError(f"'grid' must have shape {(len(self._optionlet_tenors), self._nb_strikes)}")
        df = pd.DataFrame(values, index=[tenor.name for tenor in self._optionlet_tenors], columns=self.strikes())
        df.index.name = 'optionlet_tenor'
        return df

    def __repr__(self):
        return (f"OptionletStripper(index={self._index!r}, "
                f"optionlet_tenors={[tenor.name for tenor in self._optionlet_tenors]}, strikes={list(self.strikes())})")
