"""
Filter Bank Interfaces

This module defines the value objects and protocols shared by the filter
implementations, the coefficient designer and the MIDI filter bank.
Filters are plain stateful map functions: configuration is immutable,
runtime history is private to one signal stream.
"""

from typing import Protocol, Sequence, Tuple, runtime_checkable
from dataclasses import dataclass
from enum import Enum
import numpy as np

class FilterType(Enum):
    """Supported digital filter designs"""
    BUTTERWORTH = "butterworth"
    ELLIPTIC = "elliptic"
    FIR = "fir"

class FilterResponse(Enum):
    """Filter frequency response types"""
    LOWPASS = "lowpass"
    BANDPASS = "bandpass"

@dataclass(frozen=True)
class FilterSpecification:
    """
    Immutable value object for filter specifications.

    Encapsulates all parameters needed to design a digital filter.
    For band responses ``order`` is the prototype order, so the
    resulting transfer function has order ``2 * order``.
    """
    filter_type: FilterType
    response_type: FilterResponse
    cutoff_frequencies: Tuple[float, ...]
    sample_rate: float
    order: int
    ripple_db: float = 0.5
    attenuation_db: float = 60.0

    def __post_init__(self):
        """Validate filter specification parameters"""
        if self.sample_rate <= 0:
            raise ValueError("Sample rate must be positive")
        if self.order <= 0:
            raise ValueError("Filter order must be positive")
        if not self.cutoff_frequencies:
            raise ValueError("At least one cutoff frequency required")

        # Validate cutoff frequencies are within Nyquist limit
        nyquist = self.sample_rate / 2
        for freq in self.cutoff_frequencies:
            if freq <= 0 or freq >= nyquist:
                raise ValueError(f"Cutoff frequency {freq} must be between 0 and {nyquist} Hz")

    @property
    def normalized_cutoff(self) -> Tuple[float, ...]:
        """Cutoff frequencies as fractions of the Nyquist frequency"""
        nyquist = self.sample_rate / 2
        return tuple(freq / nyquist for freq in self.cutoff_frequencies)

@dataclass(frozen=True)
class FilterCoefficients:
    """
    Immutable value object for digital filter coefficients.

    Holds the numerator (b, input) and denominator (a, output) coefficients
    of a z-domain transfer function exactly as designed. The denominator is
    never normalized here; the direct-form recurrence assumes ``a[0] == 1``.
    """
    numerator: Tuple[float, ...]
    denominator: Tuple[float, ...]

    def __post_init__(self):
        """Ensure immutability and validate coefficients"""
        if len(self.numerator) == 0 or len(self.denominator) == 0:
            raise ValueError("Filter coefficients cannot be empty")

        object.__setattr__(self, 'numerator', tuple(float(c) for c in self.numerator))
        object.__setattr__(self, 'denominator', tuple(float(c) for c in self.denominator))

    @property
    def order(self) -> int:
        """Number of taps of the recurrence"""
        return len(self.numerator)

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return read-only numpy views of (b, a)"""
        b = np.array(self.numerator, dtype=np.float64)
        a = np.array(self.denominator, dtype=np.float64)
        b.setflags(write=False)
        a.setflags(write=False)
        return b, a

@runtime_checkable
class IStatefulFilter(Protocol):
    """
    Protocol for single-input/single-output stateful filters.

    A filter instance carries mutable history and belongs to exactly one
    signal stream. Consecutive ``map`` calls behave like one continuous
    stream.
    """

    def filter(self, sample: float) -> float:
        """
        Filter a single sample.

        Args:
            sample: Input sample

        Returns:
            Filtered sample
        """
        ...

    def map(self, samples: Sequence[float]) -> np.ndarray:
        """
        Filter a buffer of samples.

        Args:
            samples: 1D input buffer

        Returns:
            Filtered float32 buffer of the same length
        """
        ...

    def reset(self) -> None:
        """Discard runtime state, keeping the coefficients"""
        ...

class IFilterDesigner(Protocol):
    """Protocol for coefficient designers"""

    def design_filter(self, spec: FilterSpecification, check_stability: bool = True) -> FilterCoefficients:
        """
        Design filter coefficients based on specification.

        Args:
            spec: Filter specification parameters
            check_stability: Reject IIR designs with poles on or outside the unit circle

        Returns:
            Designed filter coefficients
        """
        ...

    def validate_specification(self, spec: FilterSpecification) -> bool:
        """
        Validate filter specification parameters.

        Args:
            spec: Filter specification to validate

        Returns:
            True if specification is valid
        """
        ...
