"""
Coefficient design and the precomputed coefficient tables.
"""

from .filter_designer import ScipyFilterDesigner, FilterDesignService
from .coefficient_tables import (
    SUPPORTED_SAMPLE_RATES, FIR1_LOWPASS_FACTORS, IIR_LOWPASS_FACTORS,
    MIN_MIDI_PITCH, MAX_MIDI_PITCH,
    is_supported_sample_rate, midi_pitch_frequency, midi_pitch_passband,
    supported_pitches, midi_pitch_coefficients, fir1_16th_order_lowpass,
    butterworth_4th_order_lowpass, elliptic_8th_order_lowpass, get_design_service
)

__all__ = [
    'ScipyFilterDesigner',
    'FilterDesignService',
    'SUPPORTED_SAMPLE_RATES',
    'FIR1_LOWPASS_FACTORS',
    'IIR_LOWPASS_FACTORS',
    'MIN_MIDI_PITCH',
    'MAX_MIDI_PITCH',
    'is_supported_sample_rate',
    'midi_pitch_frequency',
    'midi_pitch_passband',
    'supported_pitches',
    'midi_pitch_coefficients',
    'fir1_16th_order_lowpass',
    'butterworth_4th_order_lowpass',
    'elliptic_8th_order_lowpass',
    'get_design_service'
]
