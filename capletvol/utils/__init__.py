# -*- coding: utf-8 -*-
from capletvol.utils.daycount import day_count, year_frac
from capletvol.utils.tenor import Tenor, clean_tenor, tenor_to_date_offset
from capletvol.utils.business_day_calendar import get_busdaycal
from capletvol.utils.schedule import make_schedule, generate_date_schedule, add_period_yearfrac
from capletvol.utils.observable import Observable, Observer, ObservableObserver
from capletvol.utils.settings import settings
