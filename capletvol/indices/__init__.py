# -*- coding: utf-8 -*-
from capletvol.indices.term_rate_index import TermRateIndex
