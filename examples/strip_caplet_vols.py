# Strip 3M caplet volatilities from a 2Y cap/floor term volatility surface
import logging

#%% Imports
import numpy as np
import pandas as pd
from capletvol.enums import CompoundingFreq, DayCountBasis
from capletvol.indices import TermRateIndex
from capletvol.term_structures.capfloor_term_vol_surface import CapFloorTermVolSurface
from capletvol.term_structures.optionlet_stripper import OptionletStripper
from capletvol.term_structures.zero_curve import ZeroCurve
from capletvol.utils import get_busdaycal, settings

logging.basicConfig(level=logging.DEBUG)

curve_date = pd.Timestamp('2024-06-14')
settings.evaluation_date = curve_date

#%% Market data
zero_curve = ZeroCurve(curve_date=curve_date,
                       pillar_df=pd.DataFrame({'tenor': ['3m', '6m', '1y', '2y', '3y', '5y'],
                                               'zero_rate': [0.0435, 0.0430, 0.0415, 0.0395, 0.0385, 0.0390]}),
                       compounding_freq=CompoundingFreq.QUARTERLY,
                       day_count_basis=DayCountBasis.ACT_365,
                       cal=get_busdaycal('AUD'))

index = TermRateIndex(name='3M BBSW',
                      tenor='3m',
                      zero_curve=zero_curve,
                      day_count_basis=DayCountBasis.ACT_365,
                      fixing_cal=get_busdaycal('AUD'),
                      fixing_days=0)

surface = CapFloorTermVolSurface(
    reference_date=curve_date,
    quote_vol_sln=pd.DataFrame({'tenor': ['1y', '18m', '2y'],
                                '3.0%': [0.240, 0.245, 0.250],
                                '3.5%': [0.215, 0.222, 0.228],
                                '4.0%': [0.200, 0.208, 0.215],
                                '4.5%': [0.205, 0.212, 0.218],
                                '5.0%': [0.218, 0.224, 0.229]}))

#%% Strip the optionlet volatilities
stripper = OptionletStripper(surface=surface, index=index, switch_strikes=0.04)
print(stripper.to_frame('capfloor_vols'))
print(stripper.to_frame('optionlet_vols'))

# The stripped optionlets reprice the caps/floors
assert np.allclose(stripper.optionlet_prices().cumsum(axis=0), stripper.capfloor_prices())

#%% A change of market data restrips on the next read
quotes = surface.quotes()
quotes[quotes.columns[1:]] += 0.01
surface.set_vols(quotes)
print(stripper.to_frame('optionlet_vols'))
