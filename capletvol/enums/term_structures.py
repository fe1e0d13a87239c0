# -*- coding: utf-8 -*-
from enum import Enum
from capletvol.enums.helper import is_valid_enum_value, get_enum_member


class TermRate(Enum):
    SIMPLE = 'simple'
    CONTINUOUS = 'continuous'
    ANNUAL = 'annual'


class OptionType(Enum):
    CALL = 'call'
    PUT = 'put'

    @property
    def cp(self) -> int:
        """Black76 call/put flag: 1 for a call, -1 for a put."""
        return 1 if self == OptionType.CALL else -1

    @classmethod
    def is_valid(cls, value):
        return is_valid_enum_value(cls, value)

    @classmethod
    def from_value(cls, value):
        return get_enum_member(cls, value)

    @property
    def display_name(self):
        return self.name.title()


class CapFloorType(Enum):
    CAP = 'cap'
    FLOOR = 'floor'

    @property
    def option_type(self) -> OptionType:
        # A cap is a strip of calls on the index rate, a floor a strip of puts
        return OptionType.CALL if self == CapFloorType.CAP else OptionType.PUT

    @classmethod
    def from_switch_strike(cls, strike: float, switch_strike: float):
        """Out-of-the-money side for 'strike': floors below the switch strike, caps at or above it."""
        return cls.FLOOR if strike < switch_strike else cls.CAP

    @classmethod
    def is_valid(cls, value):
        return is_valid_enum_value(cls, value)

    @classmethod
    def from_value(cls, value):
        return get_enum_member(cls, value)

    @property
    def display_name(self):
        return self.name.title()
