# -*- coding: utf-8 -*-
from typing import List, Tuple
import numpy as np
import pandas as pd
from capletvol.enums import RollConv, DayCountBasis
from capletvol.utils.daycount import year_frac
from capletvol.utils.tenor import Tenor


def make_schedule(
        start_date: pd.Timestamp,
        end_date: pd.Timestamp,
        freq: Tenor,
        roll_conv: RollConv=RollConv.MODIFIED_FOLLOWING,
        cal: np.busdaycalendar=np.busdaycalendar(),
        ) -> pd.DataFrame:
    """
    Create a schedule of regular periods, generated forward from the start date. If the term is not a
    whole number of periods, there is a short last stub.

    Parameters
    ----------
    start_date : pandas.Timestamp
        Specifies the effective date of the schedule
    end_date : pandas.Timestamp
        Specifies the termination date of the schedule
    freq : Tenor
        Specify the period length, e.g. Tenor.from_value('3m')
    roll_conv : RollConv
        How to treat dates that do not fall on a valid day. The default is RollConv.MODIFIED_FOLLOWING.
    cal : np.busdaycalendar
        Specifies the business day calendar to observe.

    Returns
    -------
    schedule : pandas.DataFrame
        Columns: period_start, period_end
    """
    start_date, end_date = pd.Timestamp(start_date), pd.Timestamp(end_date)
    freq = Tenor.from_value(freq)
    if start_date >= end_date:
        raise ValueError(f"start_date {start_date} must be before end_date {end_date}")
    if freq.length == 0:
        raise ValueError("'freq' must be a non-zero tenor")

    d1, d2 = generate_date_schedule(start_date, end_date, freq, roll_conv, cal)
    return pd.DataFrame({'period_start': d1, 'period_end': d2})


def generate_date_schedule(
        start_date: pd.Timestamp,
        end_date: pd.Timestamp,
        freq: Tenor,
        roll_conv: RollConv=RollConv.MODIFIED_FOLLOWING,
        cal: np.busdaycalendar=np.busdaycalendar()
    ) -> Tuple[List, List]:
    """
    Generates a schedule of start and end dates between start_date and end_date.

    Returns
    -------
    Tuple[List, List]
        The period start dates and period end dates, rolled per 'roll_conv'.
    """
    if start_date >= end_date:
        raise ValueError("'start_date' must be earlier than 'end_date'.")

    # Unadjusted dates are offset from the start date by a multiple of 'freq' and compared unadjusted
    unadjusted = []
    i = 1
    current_date = start_date + freq.date_offset
    while current_date < end_date:
        unadjusted.append(current_date)
        i += 1
        current_date = start_date + (freq * i).date_offset

    dates = list(roll_conv.roll([start_date] + unadjusted + [end_date], cal))
    return dates[:-1], dates[1:]


def add_period_yearfrac(schedule: pd.DataFrame, day_count_basis: DayCountBasis) -> pd.DataFrame:
    """ Add the period length in years to the schedule DataFrame, always replacing existing columns"""
    if 'period_yearfrac' in schedule.columns:
        schedule.pop('period_yearfrac')
    col_index = schedule.columns.get_loc('period_end')
    years = np.atleast_1d(year_frac(schedule['period_start'], schedule['period_end'], day_count_basis))
    schedule.insert(loc=col_index + 1, column='period_yearfrac', value=years)
    return schedule
