"""
Multirate Pitch Filter Bank

Stateful direct-form FIR and IIR filters and a factory that assembles banks
of per-MIDI-pitch elliptic bandpass filters for a fixed set of sample rates.

Key Components:
- FIRFilter / IIRFilter: sample-exact recurrences over circular buffers
- create_midi_filter_bank: one new IIR filter per pitch of a requested range
- Lowpass presets at fixed fractions of the Nyquist frequency
- Decimator, Interpolator, Resampler built on the FIR filter
- ConfigurationManager: YAML and environment based settings and logging setup

Filters carry mutable history and must only be fed by a single stream.
"""

from .interfaces import FilterCoefficients, FilterSpecification, FilterType, FilterResponse, IStatefulFilter
from .filters import (
    FIRFilter, IIRFilter, MidiFilterBank, create_midi_filter_bank,
    Decimator, Interpolator, Resampler,
    create_fir1_16th_order_lowpass, create_butterworth_4th_order_lowpass,
    create_elliptic_8th_order_lowpass,
    FilterError, FilterDesignError, FilterProcessingError,
    InvalidFilterSpecificationError, FilterStateError
)
from .core import ConfigurationManager, ConfigurationError, FilterBankConfiguration, configure_logging, get_config

__all__ = [
    'FilterCoefficients',
    'FilterSpecification',
    'FilterType',
    'FilterResponse',
    'IStatefulFilter',
    'FIRFilter',
    'IIRFilter',
    'MidiFilterBank',
    'create_midi_filter_bank',
    'Decimator',
    'Interpolator',
    'Resampler',
    'create_fir1_16th_order_lowpass',
    'create_butterworth_4th_order_lowpass',
    'create_elliptic_8th_order_lowpass',
    'FilterError',
    'FilterDesignError',
    'FilterProcessingError',
    'InvalidFilterSpecificationError',
    'FilterStateError',
    'ConfigurationManager',
    'ConfigurationError',
    'FilterBankConfiguration',
    'configure_logging',
    'get_config'
]
