# -*- coding: utf-8 -*-
import os

if __name__ == "__main__":
    os.chdir(os.environ.get('PROJECT_DIR_CAPLETVOL'))

import numpy as np
import pytest
from capletvol.errors import ImpliedVolatilityError
from capletvol.pricing_engine.black76 import (black76_price,
                                              black76_price_from_std_dev,
                                              black76_solve_implied_std_dev)


def test_black76():
    F = 4.47385 / 100
    tau = 0.758904109589041
    K = 4 / 100

    cp = 1
    px = 0.005984
    px_black76 = black76_price(F=F, tau=tau, K=K, cp=cp, vol_sln=0.2074, ln_shift=0)['price']
    assert abs(px_black76 - px) < 1e-6

    cp = -1
    px = 0.001246
    px_black76 = black76_price(F=F, tau=tau, K=K, cp=cp, vol_sln=0.2074, ln_shift=0)['price']
    assert abs(px_black76 - px) < 1e-6


def test_black76_annuity_factor():
    F = 4.47385 / 100
    tau = 0.758904109589041
    K = 4 / 100

    px = black76_price(F=F, tau=tau, K=K, cp=1, vol_sln=0.2074, annuity_factor=0.5)['price']
    assert abs(px - 0.5 * 0.005984) < 1e-6


def test_put_call_parity():
    F, tau, K, vol_sln, annuity_factor = 0.035, 2.0, 0.04, 0.25, 0.9
    call = black76_price(F=F, tau=tau, K=K, cp=1, vol_sln=vol_sln, annuity_factor=annuity_factor)['price']
    put = black76_price(F=F, tau=tau, K=K, cp=-1, vol_sln=vol_sln, annuity_factor=annuity_factor)['price']
    assert abs((call - put) - annuity_factor * (F - K)) < 1e-14


def test_zero_std_dev_is_intrinsic():
    px = black76_price_from_std_dev(F=0.05, cp=1, K=0.04, std_dev=0.0, annuity_factor=0.25)['price']
    assert abs(px - 0.25 * 0.01) < 1e-15
    px = black76_price_from_std_dev(F=0.05, cp=-1, K=0.04, std_dev=0.0)['price']
    assert px == 0


def test_solve_implied_std_dev():
    F = 4.47385 / 100
    tau = 0.758904109589041
    K = 4 / 100
    std_dev = 0.2074 * np.sqrt(tau)

    for cp in [1, -1]:
        X = black76_price_from_std_dev(F=F, cp=cp, K=K, std_dev=std_dev, annuity_factor=0.24)['price'].item()
        # The same standard deviation is solved from a poor and a good initial guess
        for guess in [0.14, std_dev, 5.0]:
            solved = black76_solve_implied_std_dev(cp=cp, K=K, F=F, X=X, annuity_factor=0.24, std_dev_guess=guess)
            assert abs(solved - std_dev) < 1e-10


def test_solve_implied_std_dev_shifted():
    F, K, ln_shift, std_dev = -0.002, 0.0, 0.01, 0.3
    X = black76_price_from_std_dev(F=F, cp=1, K=K, std_dev=std_dev, ln_shift=ln_shift)['price'].item()
    solved = black76_solve_implied_std_dev(cp=1, K=K, F=F, X=X, ln_shift=ln_shift)
    assert abs(solved - std_dev) < 1e-10


def test_solve_implied_std_dev_at_intrinsic():
    assert black76_solve_implied_std_dev(cp=1, K=0.04, F=0.05, X=0.01 * 0.25, annuity_factor=0.25) == 0.0
    assert black76_solve_implied_std_dev(cp=-1, K=0.04, F=0.05, X=0.0, annuity_factor=0.25) == 0.0


def test_solve_implied_std_dev_price_out_of_bounds():
    # Below intrinsic
    with pytest.raises(ImpliedVolatilityError):
        black76_solve_implied_std_dev(cp=1, K=0.04, F=0.05, X=0.005, annuity_factor=1)
    # Negative price
    with pytest.raises(ImpliedVolatilityError):
        black76_solve_implied_std_dev(cp=-1, K=0.04, F=0.05, X=-1e-6, annuity_factor=1)
    # Not less than the forward for a call
    with pytest.raises(ImpliedVolatilityError):
        black76_solve_implied_std_dev(cp=1, K=0.04, F=0.05, X=0.05, annuity_factor=1)
    # Not less than the strike for a put
    with pytest.raises(ImpliedVolatilityError):
        black76_solve_implied_std_dev(cp=-1, K=0.04, F=0.05, X=0.041, annuity_factor=1)


def test_solve_implied_std_dev_invalid_inputs():
    with pytest.raises(ValueError):
        black76_solve_implied_std_dev(cp=0, K=0.04, F=0.05, X=0.01)
    with pytest.raises(ImpliedVolatilityError):
        black76_solve_implied_std_dev(cp=1, K=0.04, F=0.05, X=0.01, annuity_factor=0)
    with pytest.raises(ImpliedVolatilityError):
        black76_solve_implied_std_dev(cp=1, K=-0.01, F=0.05, X=0.01)
    # ImpliedVolatilityError is a ValueError
    with pytest.raises(ValueError):
        black76_solve_implied_std_dev(cp=1, K=0.04, F=0.05, X=0.0)
