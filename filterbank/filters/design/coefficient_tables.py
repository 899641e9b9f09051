"""
Coefficient tables for the filter presets and the MIDI pitch filter bank.

The tables are keyed by sample rate and MIDI pitch (pitch bank) or by an
integer Nyquist fraction (presets). Each entry is designed once on first
use and is immutable afterwards; callers feed the coefficients to the
filters unchanged.

Pitch filters follow the multirate pitch filter bank design: for MIDI
pitch ``p`` with center frequency ``f = 440 * 2 ** ((p - 69) / 12)`` the
passband is ``f * (1 - 1/(2Q)) .. f * (1 + 1/(2Q))`` with ``Q = 25``,
1 dB passband ripple and 50 dB stopband attenuation. A 4th order elliptic
prototype yields an 8th order bandpass, i.e. nine (b, a) taps.

In direct form such narrow bands lose precision as the pitch drops relative
to the sample rate, so each rate only covers the pitches whose design stays
stable and keeps its response. Lower pitches belong to the decimated rates.
"""

import logging
from typing import Dict, Tuple
import numpy as np
from scipy import signal

from filterbank.interfaces import (
    FilterCoefficients, FilterResponse, FilterSpecification, FilterType
)
from ..exceptions import FilterDesignError, InvalidFilterSpecificationError
from .filter_designer import FilterDesignService, ScipyFilterDesigner

logger = logging.getLogger('filterbank.filters.design.coefficient_tables')

# 44.1 kHz and its /2, /4, /8, /10, /16 and /50 decimations
SUPPORTED_SAMPLE_RATES: Tuple[float, ...] = (44100.0, 22050.0, 11025.0, 5512.5, 4410.0, 2756.25, 882.0)

MIN_MIDI_PITCH = 0
MAX_MIDI_PITCH = 127

FIR1_LOWPASS_FACTORS: Tuple[int, ...] = (1, 2, 3, 4, 5, 7, 8, 160)
FIR1_ORDER = 16
IIR_LOWPASS_FACTORS: Tuple[int, ...] = (2, 4, 8)
BUTTERWORTH_ORDER = 4
ELLIPTIC_ORDER = 8
ELLIPTIC_RIPPLE_DB = 0.5
ELLIPTIC_ATTENUATION_DB = 60.0

PITCH_FILTER_Q = 25.0
PITCH_FILTER_PROTOTYPE_ORDER = 4
PITCH_FILTER_RIPPLE_DB = 1.0
PITCH_FILTER_ATTENUATION_DB = 50.0
# Realised response may exceed the designed one by this much before a pitch is dropped
PITCH_FILTER_GAIN_TOLERANCE_DB = 1.0

# Normalized designs use a sample rate of 2, so Hz equal Nyquist fractions
_NORMALIZED_SAMPLE_RATE = 2.0

_design_service = FilterDesignService(ScipyFilterDesigner())
_pitch_coverage: Dict[float, range] = {}

_RESPONSE_GRID_POINTS = 4096
_PASSBAND_GRID_POINTS = 64


def is_supported_sample_rate(sample_rate: float) -> bool:
    """Check whether a pitch coefficient table exists for ``sample_rate``"""
    return float(sample_rate) in SUPPORTED_SAMPLE_RATES

def midi_pitch_frequency(pitch: int) -> float:
    """Center frequency in Hz of a MIDI pitch (A4 = 69 = 440 Hz)"""
    return 440.0 * 2.0 ** ((pitch - 69) / 12.0)

def midi_pitch_passband(pitch: int) -> Tuple[float, float]:
    """Passband edges in Hz of the filter for ``pitch``"""
    center = midi_pitch_frequency(pitch)
    half_bandwidth = center / (2.0 * PITCH_FILTER_Q)
    return center - half_bandwidth, center + half_bandwidth

def supported_pitches(sample_rate: float) -> range:
    """
    Pitches with a coefficient set at ``sample_rate``.

    A pitch is covered when its passband lies below the Nyquist frequency
    and its nine-tap design is stable and keeps its designed response. Low
    pitches at high sample rates fail the latter; they are covered by the
    decimated rates instead. Coverage is computed once per rate.

    Raises:
        InvalidFilterSpecificationError: If the sample rate is not supported
    """
    _require_sample_rate(sample_rate)
    sample_rate = float(sample_rate)
    coverage = _pitch_coverage.get(sample_rate)
    if coverage is None:
        coverage = _find_pitch_coverage(sample_rate)
        _pitch_coverage[sample_rate] = coverage
    return coverage

def midi_pitch_coefficients(sample_rate: float, pitch: int) -> FilterCoefficients:
    """
    Coefficients of the 8th order elliptic pitch filter.

    Args:
        sample_rate: One of ``SUPPORTED_SAMPLE_RATES``
        pitch: MIDI pitch

    Returns:
        Nine-tap (b, a) pair

    Raises:
        InvalidFilterSpecificationError: If the sample rate or pitch is not covered
    """
    _require_sample_rate(sample_rate)
    if not MIN_MIDI_PITCH <= pitch <= MAX_MIDI_PITCH:
        raise InvalidFilterSpecificationError(
            f"MIDI pitch {pitch} must be between {MIN_MIDI_PITCH} and {MAX_MIDI_PITCH}"
        )

    coverage = supported_pitches(sample_rate)
    if pitch not in coverage:
        raise InvalidFilterSpecificationError(
            f"MIDI pitch {pitch} ({midi_pitch_frequency(pitch):.2f} Hz) is not supported "
            f"at sample rate {sample_rate} Hz. Supported: {_describe_range(coverage)}"
        )

    return _design_service.get_or_create_filter(_pitch_specification(float(sample_rate), pitch))

def fir1_16th_order_lowpass(factor: int) -> Tuple[float, ...]:
    """
    Taps of the 16th order Hamming-window lowpass at Nyquist/``factor``.

    Factor 1 yields the single identity tap.

    Raises:
        InvalidFilterSpecificationError: If the factor is not supported
    """
    if factor not in FIR1_LOWPASS_FACTORS:
        raise InvalidFilterSpecificationError(
            f"Unsupported FIR lowpass factor {factor}. Supported: {FIR1_LOWPASS_FACTORS}"
        )
    if factor == 1:
        return (1.0,)

    spec = _normalized_lowpass(FilterType.FIR, factor, FIR1_ORDER)
    return _design_service.get_or_create_filter(spec).numerator

def butterworth_4th_order_lowpass(factor: int) -> FilterCoefficients:
    """
    Coefficients of the 4th order Butterworth lowpass at Nyquist/``factor``.

    Raises:
        InvalidFilterSpecificationError: If the factor is not supported
    """
    _require_iir_factor(factor)
    spec = _normalized_lowpass(FilterType.BUTTERWORTH, factor, BUTTERWORTH_ORDER)
    return _design_service.get_or_create_filter(spec)

def elliptic_8th_order_lowpass(factor: int) -> FilterCoefficients:
    """
    Coefficients of the 8th order elliptic lowpass at Nyquist/``factor``.

    Raises:
        InvalidFilterSpecificationError: If the factor is not supported
    """
    _require_iir_factor(factor)
    spec = _normalized_lowpass(FilterType.ELLIPTIC, factor, ELLIPTIC_ORDER,
                               ripple_db=ELLIPTIC_RIPPLE_DB,
                               attenuation_db=ELLIPTIC_ATTENUATION_DB)
    return _design_service.get_or_create_filter(spec)

def get_design_service() -> FilterDesignService:
    """Get the design service backing the tables"""
    return _design_service

def _normalized_lowpass(filter_type: FilterType, factor: int, order: int, **kwargs) -> FilterSpecification:
    return FilterSpecification(
        filter_type=filter_type,
        response_type=FilterResponse.LOWPASS,
        cutoff_frequencies=(1.0 / factor,),
        sample_rate=_NORMALIZED_SAMPLE_RATE,
        order=order,
        **kwargs
    )

def _require_sample_rate(sample_rate: float) -> None:
    if not is_supported_sample_rate(sample_rate):
        raise InvalidFilterSpecificationError(
            f"Unsupported sample rate {sample_rate} Hz. Supported: {SUPPORTED_SAMPLE_RATES}"
        )

def _require_iir_factor(factor: int) -> None:
    if factor not in IIR_LOWPASS_FACTORS:
        raise InvalidFilterSpecificationError(
            f"Unsupported IIR lowpass factor {factor}. Supported: {IIR_LOWPASS_FACTORS}"
        )

def _pitch_specification(sample_rate: float, pitch: int) -> FilterSpecification:
    return FilterSpecification(
        filter_type=FilterType.ELLIPTIC,
        response_type=FilterResponse.BANDPASS,
        cutoff_frequencies=midi_pitch_passband(pitch),
        sample_rate=sample_rate,
        order=PITCH_FILTER_PROTOTYPE_ORDER,
        ripple_db=PITCH_FILTER_RIPPLE_DB,
        attenuation_db=PITCH_FILTER_ATTENUATION_DB,
    )

def _find_pitch_coverage(sample_rate: float) -> range:
    """
    Contiguous pitch range with usable designs at ``sample_rate``.

    Starts at the highest pitch below Nyquist and walks down until the
    first design that is unstable or misses its response.
    """
    nyquist = sample_rate / 2.0
    highest = MIN_MIDI_PITCH - 1
    for pitch in range(MIN_MIDI_PITCH, MAX_MIDI_PITCH + 1):
        if midi_pitch_passband(pitch)[1] < nyquist:
            highest = pitch

    lowest = highest + 1
    for pitch in range(highest, MIN_MIDI_PITCH - 1, -1):
        if not _is_usable_pitch_design(sample_rate, pitch):
            break
        lowest = pitch

    coverage = range(lowest, highest + 1)
    logger.info(f"MIDI pitch coverage at {sample_rate} Hz: {_describe_range(coverage)}")
    return coverage

def _is_usable_pitch_design(sample_rate: float, pitch: int) -> bool:
    """Check stability and the realised magnitude response of a pitch design"""
    spec = _pitch_specification(sample_rate, pitch)
    try:
        coefficients = _design_service.get_or_create_filter(spec)
    except FilterDesignError as e:
        logger.debug(f"No usable design for MIDI pitch {pitch} at {sample_rate} Hz: {e}")
        return False

    low, high = spec.cutoff_frequencies
    frequencies = np.concatenate([
        np.linspace(0.0, sample_rate / 2.0, _RESPONSE_GRID_POINTS),
        np.linspace(low, high, _PASSBAND_GRID_POINTS),
    ])
    _, response = signal.freqz(coefficients.numerator, coefficients.denominator,
                               worN=frequencies, fs=sample_rate)
    magnitude = np.abs(response)
    passband = magnitude[-_PASSBAND_GRID_POINTS:]

    max_gain = 10.0 ** (PITCH_FILTER_GAIN_TOLERANCE_DB / 20.0)
    min_passband_gain = 10.0 ** (-(PITCH_FILTER_RIPPLE_DB + PITCH_FILTER_GAIN_TOLERANCE_DB) / 20.0)
    if not np.all(np.isfinite(magnitude)) or magnitude.max() > max_gain or passband.min() < min_passband_gain:
        logger.debug(f"Design for MIDI pitch {pitch} at {sample_rate} Hz misses its response "
                     f"(peak gain {magnitude.max():.3g}, passband minimum {passband.min():.3g})")
        return False
    return True

def _describe_range(pitches: range) -> str:
    return f"{pitches.start}..{pitches.stop - 1}" if pitches else "none"
