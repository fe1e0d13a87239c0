# -*- coding: utf-8 -*-
import os
if __name__ == "__main__":
    os.chdir(os.environ.get('PROJECT_DIR_CAPLETVOL'))

import pytest
from capletvol.enums import DayCountBasis, CompoundingFreq, RollConv, OptionType, CapFloorType


def test_day_count_basis_from_value():
    assert DayCountBasis.from_value('act/365') == DayCountBasis.ACT_365
    assert DayCountBasis.from_value('ACT/365F') == DayCountBasis.ACT_365
    assert DayCountBasis.from_value('Actual/365Fixed') == DayCountBasis.ACT_365
    assert DayCountBasis.from_value('act360') == DayCountBasis.ACT_360
    assert DayCountBasis.from_value('30e/360') == DayCountBasis._30E_360
    assert DayCountBasis.from_value(None) == DayCountBasis.ACT_365
    assert DayCountBasis.from_value(DayCountBasis.ACT_ACT) == DayCountBasis.ACT_ACT
    assert DayCountBasis.ACT_360.days_per_year == 360
    assert DayCountBasis.is_valid('act/365f')
    assert not DayCountBasis.is_valid('act/364')
    with pytest.raises(ValueError):
        DayCountBasis.from_value('act/364')


def test_compounding_freq_and_roll_conv():
    assert CompoundingFreq.from_value('quarterly').periods_per_year == 4
    assert CompoundingFreq.from_value(None) == CompoundingFreq.CONTINUOUS
    assert RollConv.from_value('modified_following') == RollConv.MODIFIED_FOLLOWING
    assert RollConv.from_value('Modified Following') == RollConv.MODIFIED_FOLLOWING
    assert RollConv.MODIFIED_FOLLOWING.display_name == 'Modified Following'


def test_option_type():
    assert OptionType.CALL.cp == 1
    assert OptionType.PUT.cp == -1
    assert OptionType.from_value('Call') == OptionType.CALL
    with pytest.raises(ValueError):
        OptionType.from_value('straddle')


def test_capfloor_type():
    assert CapFloorType.CAP.option_type == OptionType.CALL
    assert CapFloorType.FLOOR.option_type == OptionType.PUT
    assert CapFloorType.from_value('floor') == CapFloorType.FLOOR
    assert CapFloorType.FLOOR.display_name == 'Floor'


def test_capfloor_type_from_switch_strike():
    # Strikes below the switch strike are floors, at or above are caps
    assert CapFloorType.from_switch_strike(0.03, 0.04) == CapFloorType.FLOOR
    assert CapFloorType.from_switch_strike(0.04, 0.04) == CapFloorType.CAP
    assert CapFloorType.from_switch_strike(0.05, 0.04) == CapFloorType.CAP
    assert CapFloorType.from_switch_strike(0.03, 0.04).option_type == OptionType.PUT
