# -*- coding: utf-8 -*-
import os
if __name__ == "__main__":
    os.chdir(os.environ.get('PROJECT_DIR_CAPLETVOL'))

import calendar
import datetime as dt
import numpy as np
import pandas as pd
from capletvol.enums import DayCountBasis


def convert_to_same_shape_DatetimeIndex(start_date, end_date):
    start_dti = to_datetimeindex(start_date)
    end_dti = to_datetimeindex(end_date)

    scalar_output = len(start_dti) == 1 and len(end_dti) == 1

    if len(start_dti) == 1 and len(end_dti) > 1:
        start_dti = pd.DatetimeIndex([start_dti.values[0] for _ in range(len(end_dti))])
    elif len(start_dti) > 1 and len(end_dti) == 1:
        end_dti = pd.DatetimeIndex([end_dti.values[0] for _ in range(len(start_dti))])

    return start_dti, end_dti, scalar_output


def day_count(start_date,
              end_date,
              day_count_basis: DayCountBasis):

    # References
    # [1] The excel file "30-360-2006ISDADefs" sourced from https://www.isda.org/2008/12/22/30-360-day-count-conventions/

    start_dti, end_dti, scalar_output = convert_to_same_shape_DatetimeIndex(start_date, end_date)

    if not (start_dti <= end_dti).all():
        raise ValueError("'start_date' must be on or before 'end_date'")

    if day_count_basis in {DayCountBasis.ACT_360, DayCountBasis.ACT_365, DayCountBasis.ACT_ACT}:
        # Act = the actual number of days between the dates
        result = (end_dti - start_dti).days.values

    elif day_count_basis == DayCountBasis._30_360:
        # "30/360" / "Bond Basis", tab "30-360 Bond Basis" in [1]
        # If (DAY1=31), Set D1=30, Otherwise set D1=DAY1
        d1 = np.where(start_dti.day == 31, 30, start_dti.day)
        # If (DAY2=31) and (DAY1=30 or 31), Then set D2=30, Otherwise set D2=DAY2
        d2 = np.where(np.logical_and(d1 == 30, end_dti.day == 31), 30, end_dti.day)
        result = 360 * (end_dti.year - start_dti.year).values \
               + 30 * (end_dti.month - start_dti.month).values \
               + d2 - d1

    elif day_count_basis == DayCountBasis._30E_360:
        # "30E/360" / "Eurobond Basis", tab "30E-360 Eurobond" in [1]
        d1 = np.where(start_dti.day == 31, 30, start_dti.day)
        d2 = np.where(end_dti.day == 31, 30, end_dti.day)
        result = 360 * (end_dti.year - start_dti.year).values \
               + 30 * (end_dti.month - start_dti.month).values \
               + d2 - d1
    else:
        raise ValueError(f"Unsupported day count basis {day_count_basis}")

    result = np.asarray(result)
    if scalar_output:
        return result.item()
    else:
        return result


def year_frac(start_date,
              end_date,
              day_count_basis: DayCountBasis):

    if day_count_basis in {DayCountBasis._30_360, DayCountBasis._30E_360, DayCountBasis.ACT_360}:
        return day_count(start_date, end_date, day_count_basis) / 360.0

    elif day_count_basis == DayCountBasis.ACT_365:
        return day_count(start_date, end_date, day_count_basis) / 365.0

    elif day_count_basis == DayCountBasis.ACT_ACT:
        start_dti, end_dti, scalar_output = convert_to_same_shape_DatetimeIndex(start_date, end_date)
        if not (start_dti <= end_dti).all():
            raise ValueError("'start_date' must be on or before 'end_date'")

        start_year = start_dti.year
        end_year = end_dti.year
        year_1_diff = 365 + start_year.map(calendar.isleap)
        year_2_diff = 365 + end_year.map(calendar.isleap)

        total_sum = end_year - start_year - 1
        diff_first = pd.DatetimeIndex([dt.datetime(v + 1, 1, 1) for v in start_year]) - start_dti
        total_sum += diff_first.days / year_1_diff
        diff_second = end_dti - pd.DatetimeIndex([dt.datetime(v, 1, 1) for v in end_year])
        total_sum += diff_second.days / year_2_diff

        total_sum = np.asarray(total_sum, dtype='float64')
        if scalar_output:
            return total_sum.item()
        else:
            return total_sum
    else:
        raise ValueError(f"Unsupported day count basis {day_count_basis}")


def to_datetimeindex(date_object) -> pd.DatetimeIndex:
    """
    Converts a date-like object to a pandas DatetimeIndex.

    Supported types: pd.DatetimeIndex, pd.Timestamp, np.datetime64, dt.date, dt.datetime,
    pd.Series, list and np.ndarray. Unsupported types raise a ValueError.
    """
    if isinstance(date_object, pd.DatetimeIndex):
        return date_object
    if isinstance(date_object, pd.Timestamp):
        return pd.DatetimeIndex([date_object.to_pydatetime()])
    elif isinstance(date_object, np.datetime64):
        return pd.DatetimeIndex([pd.to_datetime(date_object)])
    elif isinstance(date_object, (dt.date, dt.datetime)):
        return pd.DatetimeIndex([dt.datetime(date_object.year, date_object.month, date_object.day)])
    elif isinstance(date_object, (pd.Series, list, np.ndarray)):
        return pd.DatetimeIndex(date_object)
    else:
        raise ValueError("Unsupported type", type(date_object), date_object)


if __name__ == "__main__":
    # Example usage
    start_date = pd.date_range(start='2024-01-01', end='2024-12-01', freq='ME')
    end_date = pd.date_range(start='2024-02-29', end='2024-12-31', freq='ME')

    day_count_basis = DayCountBasis.from_value('act/365')
    days = day_count(start_date, end_date, day_count_basis)
    years = year_frac(start_date, end_date, day_count_basis)

    for d1, d2, n, yf in zip(start_date, end_date, days, years):
        print(d1.date(), d2.date(), n, round(yf, 6))
