# -*- coding: utf-8 -*-
# Shared market data: a flat 4% curve, a 3M index on a weekday calendar and a 2Y cap/floor vol surface.

import numpy as np
import pandas as pd
import pytest
from capletvol.enums import CompoundingFreq, DayCountBasis
from capletvol.indices import TermRateIndex
from capletvol.term_structures.capfloor_term_vol_surface import CapFloorTermVolSurface
from capletvol.term_structures.zero_curve import ZeroCurve
from capletvol.utils.settings import settings


EVALUATION_DATE = pd.Timestamp(2024, 6, 14) # Friday
STRIKES = [0.03, 0.035, 0.04, 0.045, 0.05]


@pytest.fixture(autouse=True)
def evaluation_date():
    settings.evaluation_date = EVALUATION_DATE
    yield EVALUATION_DATE
    settings.evaluation_date = None


@pytest.fixture
def zero_curve():
    pillar_df = pd.DataFrame({'years': [0.25, 0.5, 1, 2, 3, 5, 10],
                              'zero_rate': [0.04] * 7})
    return ZeroCurve(curve_date=EVALUATION_DATE,
                     pillar_df=pillar_df,
                     compounding_freq=CompoundingFreq.CONTINUOUS,
                     day_count_basis=DayCountBasis.ACT_365)


@pytest.fixture
def index(zero_curve):
    return TermRateIndex(name='3M BBSW',
                         tenor='3m',
                         zero_curve=zero_curve,
                         day_count_basis=DayCountBasis.ACT_365,
                         fixing_cal=np.busdaycalendar(),
                         fixing_days=2)


def make_surface(vols_by_tenor: dict, strikes=STRIKES) -> CapFloorTermVolSurface:
    quote_vol_sln = pd.DataFrame([[tenor] + list(vols) for tenor, vols in vols_by_tenor.items()],
                                 columns=['tenor'] + [f'{round(100 * K, 4)}%' for K in strikes])
    return CapFloorTermVolSurface(reference_date=EVALUATION_DATE, quote_vol_sln=quote_vol_sln)


@pytest.fixture
def flat_surface():
    return make_surface({'1y': [0.20] * 5, '18m': [0.20] * 5, '2y': [0.20] * 5})


@pytest.fixture
def smile_surface():
    # Volatilities increase with tenor
    return make_surface({'1y': [0.22, 0.20, 0.19, 0.20, 0.21],
                         '18m': [0.23, 0.21, 0.20, 0.21, 0.22],
                         '2y': [0.24, 0.22, 0.21, 0.22, 0.23]})


@pytest.fixture
def surface_factory():
    return make_surface
