# -*- coding: utf-8 -*-
from capletvol.enums.utils import DayCountBasis, CompoundingFreq, RollConv
from capletvol.enums.term_structures import TermRate, OptionType, CapFloorType
