# -*- coding: utf-8 -*-
from typing import Optional, TYPE_CHECKING
import numpy as np
import pandas as pd
from capletvol.enums import DayCountBasis
from capletvol.utils.daycount import year_frac
from capletvol.utils.settings import settings
from capletvol.pricing_engine.black76 import black76_price

if TYPE_CHECKING:
    from capletvol.instruments.ir.capfloor import CapFloor
    from capletvol.term_structures.zero_curve import ZeroCurve


class BlackCapFloorEngine:
    """
    Prices a cap/floor as the sum of its optionlets under Black76 with a single (flat) lognormal volatility.

    Optionlet expiries are measured from 'reference_date' (defaults to the evaluation date) per 'day_count_basis'.
    Optionlets are discounted from their payment date on 'discount_curve' (defaults to the index discount curve).
    """

    def __init__(self,
                 vol_sln: float,
                 day_count_basis: DayCountBasis=DayCountBasis.ACT_365,
                 discount_curve: Optional['ZeroCurve']=None,
                 ln_shift: float=0.0,
                 reference_date: Optional[pd.Timestamp]=None):
        if vol_sln < 0:
            raise ValueError(f"'vol_sln' must be non-negative. Instead is {vol_sln}")
        self.vol_sln = vol_sln
        self.day_count_basis = DayCountBasis.from_value(day_count_basis)
        self.discount_curve = discount_curve
        self.ln_shift = ln_shift
        self.reference_date = None if reference_date is None else pd.Timestamp(reference_date)

    def optionlet_details(self, capfloor: 'CapFloor') -> pd.DataFrame:
        """The caplet schedule of 'capfloor' with the Black76 inputs and price of each optionlet."""
        reference_date = settings.evaluation_date if self.reference_date is None else self.reference_date
        discount_curve = self.discount_curve if self.discount_curve is not None else capfloor.index.discount_curve

        df = capfloor.schedule.copy()
        df['F'] = [capfloor.index.forecast_fixing(fixing_date) for fixing_date in df['fixing_date']]
        # Fixed optionlets have zero time to expiry and are priced at intrinsic value
        df['expiry_years'] = np.atleast_1d(
            year_frac(reference_date, df['fixing_date'].clip(lower=reference_date), self.day_count_basis))
        df['discount_factors'] = discount_curve.get_discount_factors(dates=df['payment_date'])
        df['annuity_factor'] = df['accrual'] * df['discount_factors']
        df['vol_sln'] = self.vol_sln
        df['price'] = black76_price(F=df['F'].values,
                                    tau=df['expiry_years'].values,
                                    cp=capfloor.capfloor_type.option_type.cp,
                                    K=capfloor.strike,
                                    vol_sln=self.vol_sln,
                                    ln_shift=self.ln_shift,
                                    annuity_factor=df['annuity_factor'].values)['price']
        return df

    def npv(self, capfloor: 'CapFloor') -> float:
        return float(self.optionlet_details(capfloor)['price'].sum() * capfloor.notional)
