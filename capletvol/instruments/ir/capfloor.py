# -*- coding: utf-8 -*-
import os
if __name__ == "__main__":
    os.chdir(os.environ.get('PROJECT_DIR_CAPLETVOL'))

from dataclasses import dataclass
from typing import Union
import pandas as pd
from capletvol.enums import CapFloorType
from capletvol.indices.term_rate_index import TermRateIndex
from capletvol.pricing_engine.black_capfloor_engine import BlackCapFloorEngine
from capletvol.term_structures.zero_curve import ZeroCurve
from capletvol.utils.schedule import make_schedule, add_period_yearfrac
from capletvol.utils.settings import settings
from capletvol.utils.tenor import Tenor


@dataclass
class CapFloor:
    """
    A cap (strip of caplets) or floor (strip of floorlets) on a term rate index.

    'schedule' has one row per optionlet with columns
    fixing_date, period_start, period_end, payment_date, accrual.
    """
    capfloor_type: CapFloorType
    strike: float
    index: TermRateIndex
    schedule: pd.DataFrame
    engine: BlackCapFloorEngine
    notional: float=1.0

    def __post_init__(self):
        self.capfloor_type = CapFloorType.from_value(self.capfloor_type)
        required_cols = ['fixing_date', 'period_start', 'period_end', 'payment_date', 'accrual']
        missing_cols = [col for col in required_cols if col not in self.schedule.columns]
        if missing_cols:
            raise ValueError(f"'schedule' is missing columns {missing_cols}")
        if len(self.schedule) == 0:
            raise ValueError("'schedule' must have at least one optionlet")

    def npv(self) -> float:
        return self.engine.npv(self)

    def optionlet_details(self) -> pd.DataFrame:
        return self.engine.optionlet_details(self)

    def last_fixing_date(self) -> pd.Timestamp:
        return pd.Timestamp(self.schedule['fixing_date'].iloc[-1])

    def last_payment_date(self) -> pd.Timestamp:
        return pd.Timestamp(self.schedule['payment_date'].iloc[-1])

    def last_accrual_period(self) -> float:
        return float(self.schedule['accrual'].iloc[-1])

    def discount_curve(self) -> ZeroCurve:
        if self.engine.discount_curve is not None:
            return self.engine.discount_curve
        return self.index.discount_curve

    def __repr__(self):
        return (f"CapFloor({self.capfloor_type.display_name}, strike={self.strike}, index={self.index!r}, "
                f"{self.schedule['period_start'].iloc[0].date()} to {self.schedule['period_end'].iloc[-1].date()})")


def make_capfloor(capfloor_type: Union[CapFloorType, str],
                  length: Union[Tenor, str],
                  index: TermRateIndex,
                  strike: float,
                  forward_start_days: int,
                  engine: BlackCapFloorEngine,
                  notional: float=1.0) -> CapFloor:
    """
    Build a cap/floor of term 'length' on 'index' in the market convention.

    The cap/floor starts 'forward_start_days' after the spot (value) date of the evaluation date and has
    one optionlet per index period. A spot starting cap/floor (forward_start_days == 0) excludes the
    first optionlet, as its rate fixes on the evaluation date.
    """
    length = Tenor.from_value(length)
    cal = index.fixing_calendar()

    spot_date = index.value_date(settings.evaluation_date)
    start_date = index.roll_conv.roll(spot_date + pd.DateOffset(days=forward_start_days), cal)[0]
    # Unadjusted, make_schedule rolls it
    end_date = start_date + length.date_offset

    schedule = make_schedule(start_date=start_date,
                             end_date=end_date,
                             freq=index.tenor(),
                             roll_conv=index.roll_conv,
                             cal=cal)
    schedule.insert(loc=0, column='fixing_date', value=[index.fixing_date(d) for d in schedule['period_start']])
    schedule = add_period_yearfrac(schedule, index.day_count_basis)
    schedule['payment_date'] = schedule['period_end']
    schedule['accrual'] = schedule.pop('period_yearfrac')

    if forward_start_days == 0:
        if len(schedule) == 1:
            raise ValueError(f"A spot starting cap/floor of length {length.name} on {index!r} has no optionlets")
        schedule = schedule.iloc[1:].reset_index(drop=True)

    return CapFloor(capfloor_type=capfloor_type,
                    strike=strike,
                    index=index,
                    schedule=schedule,
                    engine=engine,
                    notional=notional)
