# -*- coding: utf-8 -*-
from functools import reduce, lru_cache
import holidays
import numpy as np


HOLIDAY_YEARS = range(1990, 2100)

# Primary holiday calendar of each currency, per the 'holidays' package
CCY_HOLIDAY_DEFINITION = {
    'AUD': ('AU', 'NSW'),
    'CAD': ('CA', 'ON'),
    'CHF': ('CH', 'ZH'),
    'CNY': ('CN', None),
    'DKK': ('DK', None),
    'EUR': ('ECB', None),
    'GBP': ('UK', 'ENG'),
    'HKD': ('HK', None),
    'ILS': ('IL', None),
    'JPY': ('JP', None),
    'NOK': ('NO', None),
    'NZD': ('NZ', 'AUK'),
    'SEK': ('SE', None),
    'SGD': ('SG', None),
    'USD': ('US', 'NY'),
    'ZAR': ('ZA', None),
}


@lru_cache(maxsize=None)
def get_holidays_object(key: str) -> holidays.HolidayBase:
    """Holidays of a currency (e.g. 'USD') or of an ISO country code (e.g. 'AU')."""
    key = key.upper()
    code, subdiv = CCY_HOLIDAY_DEFINITION.get(key, (key, None))
    if code == 'ECB':
        return holidays.ECB(years=HOLIDAY_YEARS)
    try:
        return holidays.country_holidays(code, subdiv=subdiv, years=HOLIDAY_YEARS)
    except NotImplementedError:
        raise ValueError(f"Holidays not setup for {key}")


def convert_weekend_to_weekmask(weekend_set):
    "For converting the holidays.weekend attribute to a valid weekmask for numpy.busdaycalendar"
    weekmask = [1, 1, 1, 1, 1, 1, 1]
    for weekend_day in weekend_set:
        weekmask[weekend_day] = 0
    return ''.join(map(str, weekmask))


def get_busdaycal(keys) -> np.busdaycalendar:
    """
    Create a calendar which has the holidays and business days of the currencies/locales.
    """

    if keys is None:
        return np.busdaycalendar()

    if isinstance(keys, str):
        keys = [keys.upper()]
    else:
        keys = sorted(set(key.upper() for key in keys))

    holiday_objects = [get_holidays_object(key) for key in keys]
    combined_weekend_union = reduce(lambda x, y: x | set(y.weekend), holiday_objects, set())
    weekmask = convert_weekend_to_weekmask(combined_weekend_union)

    # Flatten the list of lists
    holiday_dates = sorted({h for holiday_obj in holiday_objects for h in holiday_obj.keys()})

    return np.busdaycalendar(weekmask=weekmask, holidays=np.array(holiday_dates, dtype='datetime64[D]'))
