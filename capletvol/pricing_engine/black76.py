# -*- coding: utf-8 -*-
import logging
import numpy as np
from scipy.stats import norm
from scipy.optimize import root_scalar
from capletvol.errors import ImpliedVolatilityError
from capletvol.utils.settings import STD_DEV_BOUNDS, IMPLIED_STD_DEV_XTOL, IMPLIED_STD_DEV_MAX_ITER


logger = logging.getLogger(__name__)


def black76_price(
        F: [float, np.array],
        tau: [float, np.array],
        cp: [float, np.array],
        K: [float, np.array],
        vol_sln: [float, np.array],
        ln_shift: [float, np.array]=0,
        annuity_factor: [float, np.array]=1):
    """
    Black76 pricing.

    The function has the parameter 'annuity_factor' instead of a risk-free rate.
    This allows for generic applications of Black76 to caplets/floorlets and swaptions instead of just European options delivered at expiry.

    Parameters
    ----------
    F : float
        Forward price.
    tau : float
        Time to expiry (in years).
    cp : int
        Option type: 1 for call option, -1 for put option.
    K : float
        Strike price.
    vol_sln : float
        Volatility (annualized).
    ln_shift : float, optional
        Log-normal shift, applied to forward price and strike (default is 0).
    annuity_factor : float, optional
        Multiplier to adjust the Black76 forward price to present value (default is 1).
        This is composed of the discount factor and the accrual period fraction.

    Returns
    -------
    results : dict
        - 'price' : np.array
    """
    F, tau, vol_sln = map(np.atleast_1d, (F, tau, vol_sln))
    std_dev = vol_sln * np.sqrt(np.maximum(tau, 0.0))
    return black76_price_from_std_dev(F=F, cp=cp, K=K, std_dev=std_dev, ln_shift=ln_shift,
                                      annuity_factor=annuity_factor)


def _d1_d2(F, K, std_dev):
    with np.errstate(divide='ignore', invalid='ignore'):
        d1 = (np.log(F / K) + 0.5 * std_dev**2) / std_dev
    return d1, d1 - std_dev


def black76_price_from_std_dev(
        F: [float, np.array],
        cp: [float, np.array],
        K: [float, np.array],
        std_dev: [float, np.array],
        ln_shift: [float, np.array]=0,
        annuity_factor: [float, np.array]=1):
    """Black76 price where the volatility is given as the standard deviation σ√τ of the log forward."""

    F, cp, K, std_dev, ln_shift, annuity_factor = map(np.atleast_1d, (F, cp, K, std_dev, ln_shift, annuity_factor))
    F = F + ln_shift
    K = K + ln_shift

    intrinsic = annuity_factor * np.maximum(0.0, cp * (F - K))
    d1, d2 = _d1_d2(F, K, std_dev)
    X = annuity_factor * cp * (F * norm.cdf(cp * d1) - K * norm.cdf(cp * d2))
    # Zero standard deviation is the intrinsic value
    X = np.where(std_dev > 0, X, intrinsic)

    return {'price': X}


def black76_std_dev_derivative(F, K, std_dev, ln_shift=0, annuity_factor=1) -> float:
    """∂X/∂σ of the Black76 price with respect to the standard deviation, identical for calls and puts."""
    d1, _ = _d1_d2(F + ln_shift, K + ln_shift, std_dev)
    return annuity_factor * (F + ln_shift) * norm.pdf(d1)


def black76_solve_implied_std_dev(
        cp: int,
        K: float,
        F: float,
        X: float,
        annuity_factor: float=1,
        std_dev_guess: float=0.1,
        ln_shift: float=0,
        bounds: tuple=STD_DEV_BOUNDS,
        xtol: float=IMPLIED_STD_DEV_XTOL,
        maxiter: int=IMPLIED_STD_DEV_MAX_ITER) -> float:
    """
    Solve the Black76 standard deviation σ√τ which reproduces the price X.

    Newton's method is run from 'std_dev_guess' (a good guess, e.g. the solution for a neighbouring
    optionlet, converges in a few iterations). If Newton's method fails or leaves 'bounds',
    Brent's method is used over 'bounds'.

    Raises
    ------
    ImpliedVolatilityError
        If X is outside the arbitrage free bounds of the option or no standard deviation within 'bounds' reproduces X.
    """
    if cp not in (1, -1):
        raise ValueError(f"'cp' must be 1 or -1. Instead is {cp}")
    if annuity_factor <= 0:
        raise ImpliedVolatilityError(f"annuity factor ({annuity_factor}) must be positive")
    F_, K_ = F + ln_shift, K + ln_shift
    if F_ <= 0 or K_ <= 0:
        raise ImpliedVolatilityError(f"shifted forward ({F_}) and shifted strike ({K_}) must be positive")

    intrinsic = annuity_factor * max(0.0, cp * (F_ - K_))
    upper = annuity_factor * (F_ if cp == 1 else K_)
    abs_tol = 1e-14 * annuity_factor
    if X < intrinsic - abs_tol:
        raise ImpliedVolatilityError(f"price ({X}) is less than the intrinsic value ({intrinsic})")
    if X >= upper:
        raise ImpliedVolatilityError(f"price ({X}) is not less than the upper bound ({upper})")
    if X <= intrinsic + abs_tol:
        # No time value, the zero standard deviation is the only solution
        return 0.0

    def error_function(std_dev_):
        return black76_price_from_std_dev(F=F, cp=cp, K=K, std_dev=std_dev_, ln_shift=ln_shift,
                                          annuity_factor=annuity_factor)['price'].item() - X

    def error_function_prime(std_dev_):
        return black76_std_dev_derivative(F=F, K=K, std_dev=std_dev_, ln_shift=ln_shift,
                                          annuity_factor=annuity_factor)

    lower_bound, upper_bound = bounds
    x0 = min(max(std_dev_guess, lower_bound), upper_bound)

    try:
        res = root_scalar(error_function, x0=x0, fprime=error_function_prime, method='newton', xtol=xtol, maxiter=maxiter)
        if res.converged and lower_bound <= res.root <= upper_bound:
            return res.root
    except (RuntimeError, ZeroDivisionError, FloatingPointError) as e:
        logger.debug(f"Newton's method failed from guess {x0}: {e}")

    # Brent's method requires f(a), f(b) to have different signs
    f_lower, f_upper = error_function(lower_bound), error_function(upper_bound)
    if np.sign(f_lower) == np.sign(f_upper):
        raise ImpliedVolatilityError(
            f"no standard deviation in {bounds} reproduces price {X}; errors at the bounds are {f_lower}, {f_upper}")
    try:
        res = root_scalar(error_function, bracket=bounds, method='brentq', xtol=xtol, maxiter=maxiter)
    except (RuntimeError, ValueError) as e:
        raise ImpliedVolatilityError(f"Brent's method failed to solve the standard deviation: {e}") from e
    if not res.converged:
        raise ImpliedVolatilityError(f"Brent's method did not converge: {res.flag}")
    return res.root
