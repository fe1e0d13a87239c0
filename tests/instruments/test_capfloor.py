# -*- coding: utf-8 -*-
import os
if __name__ == "__main__":
    os.chdir(os.environ.get('PROJECT_DIR_CAPLETVOL'))

import numpy as np
import pandas as pd
import pytest
from capletvol.enums import CapFloorType, DayCountBasis
from capletvol.instruments.ir.capfloor import CapFloor, make_capfloor
from capletvol.pricing_engine.black76 import black76_price
from capletvol.pricing_engine.black_capfloor_engine import BlackCapFloorEngine


def test_spot_capfloor_excludes_first_optionlet(index):
    engine = BlackCapFloorEngine(0.2, DayCountBasis.ACT_365)
    cap = make_capfloor(CapFloorType.CAP, '1y', index, 0.04, 0, engine)

    # Spot date is 18-Jun-2024, the 18-Jun-2024 to 18-Sep-2024 caplet fixes on the evaluation date
    assert len(cap.schedule) == 3
    assert list(cap.schedule.columns) == ['fixing_date', 'period_start', 'period_end', 'payment_date', 'accrual']
    assert cap.schedule['period_start'].iloc[0] == pd.Timestamp(2024, 9, 18)
    assert cap.schedule['fixing_date'].iloc[0] == pd.Timestamp(2024, 9, 16)
    assert cap.last_fixing_date() == pd.Timestamp(2025, 3, 14)
    assert cap.last_payment_date() == pd.Timestamp(2025, 6, 18)
    assert abs(cap.last_accrual_period() - 92 / 365) < 1e-12
    assert cap.discount_curve() is index.discount_curve


def test_forward_starting_capfloor_keeps_first_optionlet(index):
    engine = BlackCapFloorEngine(0.2, DayCountBasis.ACT_365)
    floor = make_capfloor('floor', '1y', index, 0.04, 1, engine)
    assert floor.capfloor_type == CapFloorType.FLOOR
    assert len(floor.schedule) == 4
    assert floor.schedule['period_start'].iloc[0] == pd.Timestamp(2024, 6, 19)


def test_capfloors_of_successive_lengths_share_optionlets(index):
    engine = BlackCapFloorEngine(0.2, DayCountBasis.ACT_365)
    short = make_capfloor(CapFloorType.CAP, '18m', index, 0.04, 0, engine)
    long = make_capfloor(CapFloorType.CAP, '21m', index, 0.04, 0, engine)
    pd.testing.assert_frame_equal(short.schedule, long.schedule.iloc[:-1])


def test_npv_is_sum_of_black76_optionlets(index):
    engine = BlackCapFloorEngine(0.2, DayCountBasis.ACT_365)
    cap = make_capfloor(CapFloorType.CAP, '2y', index, 0.04, 0, engine)
    details = cap.optionlet_details()
    assert {'F', 'expiry_years', 'discount_factors', 'annuity_factor', 'price'}.issubset(details.columns)

    discount_factors = index.discount_curve.get_discount_factors(dates=cap.schedule['payment_date'])
    annuity_factor = cap.schedule['accrual'].values * discount_factors
    F = np.array([index.forecast_fixing(d) for d in cap.schedule['fixing_date']])
    tau = ((cap.schedule['fixing_date'] - pd.Timestamp(2024, 6, 14)).dt.days / 365).values
    px = black76_price(F=F, tau=tau, cp=1, K=0.04, vol_sln=0.2, annuity_factor=annuity_factor)['price']
    assert abs(cap.npv() - px.sum()) < 1e-14


def test_cap_floor_parity(index):
    engine = BlackCapFloorEngine(0.25, DayCountBasis.ACT_365)
    cap = make_capfloor(CapFloorType.CAP, '2y', index, 0.035, 0, engine)
    floor = make_capfloor(CapFloorType.FLOOR, '2y', index, 0.035, 0, engine)
    details = cap.optionlet_details()
    swap = (details['annuity_factor'] * (details['F'] - 0.035)).sum()
    assert abs(cap.npv() - floor.npv() - swap) < 1e-14


def test_zero_vol_is_intrinsic(index):
    engine = BlackCapFloorEngine(0.0, DayCountBasis.ACT_365)
    cap = make_capfloor(CapFloorType.CAP, '2y', index, 0.035, 0, engine)
    details = cap.optionlet_details()
    intrinsic = (details['annuity_factor'] * np.maximum(details['F'] - 0.035, 0)).sum()
    assert abs(cap.npv() - intrinsic) < 1e-15


def test_engine_notional_and_reference_date(index):
    cap = make_capfloor(CapFloorType.CAP, '1y', index, 0.04, 0, BlackCapFloorEngine(0.2, DayCountBasis.ACT_365))
    cap_1mm = make_capfloor(CapFloorType.CAP, '1y', index, 0.04, 0, BlackCapFloorEngine(0.2, DayCountBasis.ACT_365), notional=1e6)
    assert abs(cap_1mm.npv() - 1e6 * cap.npv()) < 1e-8

    # Expiries measured from a later reference date give less time value
    later = BlackCapFloorEngine(0.2, DayCountBasis.ACT_365, reference_date=pd.Timestamp(2024, 9, 1))
    assert cap.engine.optionlet_details(cap)['expiry_years'].iloc[0] > later.optionlet_details(cap)['expiry_years'].iloc[0]


def test_invalid_capfloor(index):
    engine = BlackCapFloorEngine(0.2, DayCountBasis.ACT_365)
    with pytest.raises(ValueError):
        make_capfloor(CapFloorType.CAP, '3m', index, 0.04, 0, engine)
    with pytest.raises(ValueError):
        BlackCapFloorEngine(-0.1, DayCountBasis.ACT_365)
    with pytest.raises(ValueError):
        CapFloor(CapFloorType.CAP, 0.04, index, pd.DataFrame({'fixing_date': []}), engine)
