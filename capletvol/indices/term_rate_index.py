# -*- coding: utf-8 -*-
from typing import Optional
import numpy as np
import pandas as pd
from capletvol.enums import DayCountBasis, RollConv, TermRate
from capletvol.utils.tenor import Tenor
from capletvol.utils.observable import ObservableObserver
from capletvol.utils.settings import DEFAULT_FIXING_DAYS
from capletvol.term_structures.zero_curve import ZeroCurve


class TermRateIndex(ObservableObserver):
    """
    A term rate index such as 3M BBSW or 6M EURIBOR.

    The fixing on 'fixing_date' accrues from value_date = fixing_date + fixing_days business days
    to value_date + tenor (rolled per 'roll_conv'). Fixings are forecast off 'zero_curve'.
    Observers of the index are notified when the forecasting or discounting curve changes.
    """

    def __init__(self,
                 name: str,
                 tenor,
                 zero_curve: ZeroCurve,
                 day_count_basis: DayCountBasis=DayCountBasis.ACT_365,
                 fixing_cal: np.busdaycalendar=np.busdaycalendar(),
                 fixing_days: int=DEFAULT_FIXING_DAYS,
                 roll_conv: RollConv=RollConv.MODIFIED_FOLLOWING,
                 discount_curve: Optional[ZeroCurve]=None):
        super().__init__()
        self.name = name
        self._tenor = Tenor.from_value(tenor)
        if self._tenor.length == 0:
            raise ValueError("Index tenor must be non-zero")
        self.day_count_basis = DayCountBasis.from_value(day_count_basis)
        self._fixing_cal = fixing_cal
        self.fixing_days = fixing_days
        self.roll_conv = roll_conv
        self.zero_curve = zero_curve
        self.discount_curve = zero_curve if discount_curve is None else discount_curve
        self.register_with(self.zero_curve)
        if self.discount_curve is not self.zero_curve:
            self.register_with(self.discount_curve)

    def tenor(self) -> Tenor:
        return self._tenor

    def fixing_calendar(self) -> np.busdaycalendar:
        return self._fixing_cal

    def _busday_offset(self, date, offsets: int, roll: str) -> pd.Timestamp:
        date_np = np.array([pd.Timestamp(date)]).astype('datetime64[D]')
        return pd.Timestamp(np.busday_offset(date_np, offsets=offsets, roll=roll, busdaycal=self._fixing_cal)[0])

    def value_date(self, fixing_date) -> pd.Timestamp:
        return self._busday_offset(fixing_date, self.fixing_days, 'following')

    def fixing_date(self, value_date) -> pd.Timestamp:
        return self._busday_offset(value_date, -self.fixing_days, 'preceding')

    def maturity_date(self, value_date) -> pd.Timestamp:
        return self.roll_conv.roll(pd.Timestamp(value_date) + self._tenor.date_offset, self._fixing_cal)[0]

    def forecast_fixing(self, fixing_date) -> float:
        """Simple forward rate over the accrual period of the fixing on 'fixing_date'."""
        value_date = self.value_date(fixing_date)
        maturity_date = self.maturity_date(value_date)
        return self.zero_curve.get_forward_rates(period_start=value_date,
                                                 period_end=maturity_date,
                                                 forward_rate_type=TermRate.SIMPLE,
                                                 day_count_basis=self.day_count_basis).item()

    def __repr__(self):
        return f"TermRateIndex('{self.name}', '{self._tenor.name}')"
