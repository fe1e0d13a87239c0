# -*- coding: utf-8 -*-
import os
if __name__ == "__main__":
    os.chdir(os.environ.get('PROJECT_DIR_CAPLETVOL'))

import numpy as np
import pandas as pd
import pytest
from capletvol.enums import CompoundingFreq
from capletvol.indices import TermRateIndex
from capletvol.utils.observable import Observer
from capletvol.utils.tenor import Tenor


def test_index_dates(index):
    assert index.tenor() == Tenor.from_value('3m')
    # Friday + 2 business days
    assert index.value_date(pd.Timestamp(2024, 6, 14)) == pd.Timestamp(2024, 6, 18)
    assert index.fixing_date(pd.Timestamp(2024, 6, 18)) == pd.Timestamp(2024, 6, 14)
    assert index.fixing_date(pd.Timestamp(2024, 9, 18)) == pd.Timestamp(2024, 9, 16)
    assert index.maturity_date(pd.Timestamp(2024, 6, 18)) == pd.Timestamp(2024, 9, 18)
    # 2024-11-30 is a Saturday, modified following rolls back into November
    assert index.maturity_date(pd.Timestamp(2024, 8, 30)) == pd.Timestamp(2024, 11, 29)


def test_index_with_holidays(zero_curve):
    cal = np.busdaycalendar(holidays=np.array(['2024-06-17'], dtype='datetime64[D]'))
    index = TermRateIndex(name='3M', tenor='3m', zero_curve=zero_curve, fixing_cal=cal)
    assert index.value_date(pd.Timestamp(2024, 6, 14)) == pd.Timestamp(2024, 6, 19)


def test_forecast_fixing(index):
    # Flat 4% continuously compounded curve; the fixing accrues from 18-Sep-2024 to 18-Dec-2024
    Δt = 91 / 365
    assert abs(index.forecast_fixing(pd.Timestamp(2024, 9, 16)) - (np.exp(0.04 * Δt) - 1) / Δt) < 1e-12


def test_index_forwards_curve_notifications(index, zero_curve):

    class Counter(Observer):
        nb_updates = 0
        def update(self):
            self.nb_updates += 1

    counter = Counter()
    counter.register_with(index)
    zero_curve.set_pillars(pd.DataFrame({'years': [1.0, 5.0], 'zero_rate': [0.05, 0.05]}), CompoundingFreq.CONTINUOUS)
    assert counter.nb_updates == 1
    assert index.discount_curve is zero_curve


def test_invalid_index_tenor(zero_curve):
    with pytest.raises(ValueError):
        TermRateIndex(name='0D', tenor='0d', zero_curve=zero_curve)
