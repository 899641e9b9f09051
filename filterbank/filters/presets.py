"""
Named lowpass filter presets.

Each factory returns a new filter instance whose cutoff is a fixed fraction
of the Nyquist frequency. Unsupported factors raise
``InvalidFilterSpecificationError``.
"""

from .digital_filter import FIRFilter, IIRFilter
from .design.coefficient_tables import (
    fir1_16th_order_lowpass, butterworth_4th_order_lowpass, elliptic_8th_order_lowpass
)


def create_fir1_16th_order_lowpass(factor: int) -> FIRFilter:
    """
    16th order FIR lowpass with cutoff at Nyquist/``factor``.

    Supported factors are 1, 2, 3, 4, 5, 7, 8 and 160. Factor 1 returns
    the identity filter.
    """
    return FIRFilter(fir1_16th_order_lowpass(factor))

def create_fir1_16th_order_lowpass_cutoff_half() -> FIRFilter:
    return create_fir1_16th_order_lowpass(2)

def create_fir1_16th_order_lowpass_cutoff_third() -> FIRFilter:
    return create_fir1_16th_order_lowpass(3)

def create_fir1_16th_order_lowpass_cutoff_quarter() -> FIRFilter:
    return create_fir1_16th_order_lowpass(4)

def create_fir1_16th_order_lowpass_cutoff_fifth() -> FIRFilter:
    return create_fir1_16th_order_lowpass(5)

def create_fir1_16th_order_lowpass_cutoff_seventh() -> FIRFilter:
    return create_fir1_16th_order_lowpass(7)

def create_fir1_16th_order_lowpass_cutoff_eighth() -> FIRFilter:
    return create_fir1_16th_order_lowpass(8)

def create_fir1_16th_order_lowpass_cutoff_160th() -> FIRFilter:
    return create_fir1_16th_order_lowpass(160)


def create_butterworth_4th_order_lowpass(factor: int) -> IIRFilter:
    """4th order Butterworth lowpass with cutoff at Nyquist/``factor`` (2, 4 or 8)"""
    return IIRFilter.from_coefficients(butterworth_4th_order_lowpass(factor))

def create_butterworth_4th_order_lowpass_cutoff_half() -> IIRFilter:
    return create_butterworth_4th_order_lowpass(2)

def create_butterworth_4th_order_lowpass_cutoff_quarter() -> IIRFilter:
    return create_butterworth_4th_order_lowpass(4)

def create_butterworth_4th_order_lowpass_cutoff_eighth() -> IIRFilter:
    return create_butterworth_4th_order_lowpass(8)


def create_elliptic_8th_order_lowpass(factor: int) -> IIRFilter:
    """8th order elliptic lowpass with cutoff at Nyquist/``factor`` (2, 4 or 8)"""
    return IIRFilter.from_coefficients(elliptic_8th_order_lowpass(factor))

def create_elliptic_8th_order_lowpass_cutoff_half() -> IIRFilter:
    return create_elliptic_8th_order_lowpass(2)

def create_elliptic_8th_order_lowpass_cutoff_quarter() -> IIRFilter:
    return create_elliptic_8th_order_lowpass(4)

def create_elliptic_8th_order_lowpass_cutoff_eighth() -> IIRFilter:
    return create_elliptic_8th_order_lowpass(8)
