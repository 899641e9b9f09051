"""
Digital Filter System

This package provides the stateful direct-form FIR and IIR filters, the
named lowpass presets, multirate helpers and the MIDI pitch filter bank.
"""

from .digital_filter import FIRFilter, IIRFilter, circular_index
from .filter_bank import MidiFilterBank, create_midi_filter_bank
from .multirate import Decimator, Interpolator, Resampler
from .presets import (
    create_fir1_16th_order_lowpass,
    create_fir1_16th_order_lowpass_cutoff_half,
    create_fir1_16th_order_lowpass_cutoff_third,
    create_fir1_16th_order_lowpass_cutoff_quarter,
    create_fir1_16th_order_lowpass_cutoff_fifth,
    create_fir1_16th_order_lowpass_cutoff_seventh,
    create_fir1_16th_order_lowpass_cutoff_eighth,
    create_fir1_16th_order_lowpass_cutoff_160th,
    create_butterworth_4th_order_lowpass,
    create_butterworth_4th_order_lowpass_cutoff_half,
    create_butterworth_4th_order_lowpass_cutoff_quarter,
    create_butterworth_4th_order_lowpass_cutoff_eighth,
    create_elliptic_8th_order_lowpass,
    create_elliptic_8th_order_lowpass_cutoff_half,
    create_elliptic_8th_order_lowpass_cutoff_quarter,
    create_elliptic_8th_order_lowpass_cutoff_eighth,
)
from .exceptions import (
    FilterError, FilterDesignError, FilterProcessingError,
    InvalidFilterSpecificationError, UnsupportedFilterTypeError,
    FilterInstabilityError, FilterStateError
)

__all__ = [
    'FIRFilter',
    'IIRFilter',
    'circular_index',
    'MidiFilterBank',
    'create_midi_filter_bank',
    'Decimator',
    'Interpolator',
    'Resampler',
    'create_fir1_16th_order_lowpass',
    'create_fir1_16th_order_lowpass_cutoff_half',
    'create_fir1_16th_order_lowpass_cutoff_third',
    'create_fir1_16th_order_lowpass_cutoff_quarter',
    'create_fir1_16th_order_lowpass_cutoff_fifth',
    'create_fir1_16th_order_lowpass_cutoff_seventh',
    'create_fir1_16th_order_lowpass_cutoff_eighth',
    'create_fir1_16th_order_lowpass_cutoff_160th',
    'create_butterworth_4th_order_lowpass',
    'create_butterworth_4th_order_lowpass_cutoff_half',
    'create_butterworth_4th_order_lowpass_cutoff_quarter',
    'create_butterworth_4th_order_lowpass_cutoff_eighth',
    'create_elliptic_8th_order_lowpass',
    'create_elliptic_8th_order_lowpass_cutoff_half',
    'create_elliptic_8th_order_lowpass_cutoff_quarter',
    'create_elliptic_8th_order_lowpass_cutoff_eighth',
    'FilterError',
    'FilterDesignError',
    'FilterProcessingError',
    'InvalidFilterSpecificationError',
    'UnsupportedFilterTypeError',
    'FilterInstabilityError',
    'FilterStateError'
]
