"""
Direct-form digital filter implementation.

This module provides the stateful FIR and IIR filters used throughout the
filter bank. Both evaluate their difference equation sample by sample
against fixed-length circular buffers, so consecutive buffers are filtered
exactly as one continuous stream.

Filters are mutable and belong to exactly one signal stream. Equality and
hashing only consider the (immutable) coefficients, never runtime history.
"""

import logging
from typing import List, Optional, Sequence
import numpy as np

from filterbank.interfaces import FilterCoefficients
from .exceptions import (
    FilterProcessingError, FilterStateError, InvalidFilterSpecificationError
)

logger = logging.getLogger('filterbank.filters.digital_filter')

def circular_index(index: int, length: int) -> int:
    """Wrap ``index`` into ``[0, length)``, negative indices included"""
    return index % length

def as_sample_buffer(samples: Sequence[float]) -> np.ndarray:
    """
    Convert a sample sequence into a 1D float32 buffer.

    Raises:
        FilterProcessingError: If the data is not one-dimensional
    """
    data = np.asarray(samples, dtype=np.float32)
    if data.ndim != 1:
        raise FilterProcessingError(f"Unsupported audio data shape: {data.shape}")
    return data

def _as_coefficient_tuple(coefficients: Sequence[float]) -> tuple:
    return tuple(float(c) for c in np.asarray(coefficients, dtype=np.float64).ravel())


class FIRFilter:
    """
    Finite impulse response filter with a circular delay line.

    The single-tap ``[1.0]`` filter takes a pass-through fast path that
    produces the same output as the convolution would.
    """

    def __init__(self, coefficients: Sequence[float] = (1.0,)):
        """
        Initialize FIR filter with coefficients.

        Args:
            coefficients: Filter taps, copied on construction

        Raises:
            InvalidFilterSpecificationError: If no coefficients are given
        """
        taps = _as_coefficient_tuple(coefficients)
        if not taps:
            raise InvalidFilterSpecificationError("FIR filter requires at least one coefficient")

        self._coefficients = taps
        self._length = len(taps)
        self._is_identity = taps == (1.0,)
        self._delay_line: List[float] = []
        self._write_index = -1
        self.reset()

        logger.debug(f"Initialized {'identity' if self._is_identity else 'FIR'} filter "
                     f"({self._length} taps)")

    @property
    def coefficients(self) -> np.ndarray:
        """Get a read-only copy of the filter taps"""
        taps = np.array(self._coefficients, dtype=np.float64)
        taps.setflags(write=False)
        return taps

    @property
    def is_identity(self) -> bool:
        """True if the filter passes samples through unchanged"""
        return self._is_identity

    def add_to_delay_line(self, sample: float) -> None:
        """Advance the write index and store ``sample`` in the delay line"""
        self._write_index = circular_index(self._write_index + 1, self._length)
        self._delay_line[self._write_index] = float(sample)

    def convolve(self) -> float:
        """Convolve the current delay line contents with the coefficients"""
        if self._is_identity:
            return self._delay_line[0]

        delay_line = self._delay_line
        length = self._length
        index = self._write_index
        result = 0.0
        for coefficient in self._coefficients:
            result += coefficient * delay_line[index]
            index = circular_index(index - 1, length)
        return result

    def filter(self, sample: float) -> float:
        """Filter a single sample"""
        self.add_to_delay_line(sample)
        return self.convolve()

    def map(self, samples: Sequence[float]) -> np.ndarray:
        """
        Filter a buffer of samples.

        Args:
            samples: 1D input samples

        Returns:
            Filtered float32 samples, same length as the input
        """
        data = as_sample_buffer(samples)

        if self._is_identity:
            if data.size:
                self.add_to_delay_line(data[-1])
            return data.copy()

        out = np.empty(data.shape[0], dtype=np.float32)
        for i, sample in enumerate(data.tolist()):
            self.add_to_delay_line(sample)
            out[i] = self.convolve()
        return out

    def reset(self) -> None:
        """Zero the delay line, keeping the coefficients"""
        self._delay_line = [0.0] * self._length
        self._write_index = -1

    def __len__(self) -> int:
        return self._length

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FIRFilter):
            return NotImplemented
        return self._coefficients == other._coefficients

    def __hash__(self) -> int:
        return hash(self._coefficients)

    def __repr__(self) -> str:
        return f"FIRFilter(coefficients={list(self._coefficients)})"


class IIRFilter:
    """
    Infinite impulse response filter in direct form.

    Past inputs and past outputs live in two circular buffers of length
    ``order``. The filter starts cold: the first sample seeds both histories
    with copies of itself and is returned unchanged, which avoids a start-up
    transient. Every later sample runs the recurrence.
    """

    def __init__(self, input_coefficients: Sequence[float], output_coefficients: Sequence[float]):
        """
        Initialize IIR filter.

        Args:
            input_coefficients: Numerator (b) coefficients, defines the order
            output_coefficients: Denominator (a) coefficients, ``a[0]`` is assumed to be 1

        Raises:
            InvalidFilterSpecificationError: If no input coefficients are given
        """
        b = _as_coefficient_tuple(input_coefficients)
        a = _as_coefficient_tuple(output_coefficients)
        if not b:
            raise InvalidFilterSpecificationError("IIR filter requires at least one input coefficient")

        self._input_coefficients = b
        self._output_coefficients = a
        self._order = len(b)
        self._input_history: Optional[List[float]] = None
        self._output_history: Optional[List[float]] = None
        self._position: Optional[int] = None

        if len(a) != len(b):
            self._flag_coefficient_mismatch()

        logger.debug(f"Initialized IIR filter (order: {self._order})")

    @classmethod
    def from_coefficients(cls, coefficients: FilterCoefficients) -> 'IIRFilter':
        """Create a filter from a designed (b, a) pair"""
        return cls(coefficients.numerator, coefficients.denominator)

    @property
    def order(self) -> int:
        """Number of taps of the recurrence"""
        return self._order

    @property
    def input_coefficients(self) -> np.ndarray:
        """Get a read-only copy of the b coefficients"""
        b = np.array(self._input_coefficients, dtype=np.float64)
        b.setflags(write=False)
        return b

    @property
    def output_coefficients(self) -> np.ndarray:
        """Get a read-only copy of the a coefficients"""
        a = np.array(self._output_coefficients, dtype=np.float64)
        a.setflags(write=False)
        return a

    @property
    def is_warm(self) -> bool:
        """True once the first sample has seeded the histories"""
        return self._input_history is not None and self._output_history is not None

    def filter(self, sample: float) -> float:
        """
        Filter a single sample.

        Raises:
            FilterStateError: If exactly one of the two histories is present
            FilterProcessingError: If there are fewer output than input coefficients
        """
        x = float(sample)
        if self._input_history is None and self._output_history is None:
            self._input_history = [x] * self._order
            self._output_history = [x] * self._order
            self._position = 0
            return x
        if self._input_history is None or self._output_history is None:
            raise FilterStateError("IIR filter history is inconsistent: "
                                   "only one of input/output history is present")
        if len(self._output_coefficients) < self._order:
            raise FilterProcessingError(
                f"IIR filter needs {self._order} output coefficients, "
                f"got {len(self._output_coefficients)}"
            )

        order = self._order
        input_history = self._input_history
        output_history = self._output_history
        b = self._input_coefficients
        a = self._output_coefficients

        position = circular_index(self._position + 1, order)
        self._position = position
        input_history[position] = x
        # a[0] must not see the sample that is being computed
        output_history[position] = 0.0

        acc = output_history[position]
        j = position
        for i in range(order):
            acc += b[i] * input_history[j] - a[i] * output_history[j]
            j = circular_index(j - 1, order)

        output_history[position] = acc
        return acc

    def map(self, samples: Sequence[float]) -> np.ndarray:
        """
        Filter a buffer of samples.

        Args:
            samples: 1D input samples

        Returns:
            Filtered float32 samples, same length as the input

        Raises:
            FilterProcessingError: If processing fails
        """
        data = as_sample_buffer(samples)
        out = np.empty(data.shape[0], dtype=np.float32)
        try:
            for i, sample in enumerate(data.tolist()):
                out[i] = self.filter(sample)
        except FilterProcessingError:
            raise
        except Exception as e:
            logger.error(f"IIR filter processing failed: {e}")
            raise FilterProcessingError(f"IIR filter processing error: {e}") from e
        return out

    def reset(self) -> None:
        """Discard both histories and the position, keeping the coefficients"""
        self._input_history = None
        self._output_history = None
        self._position = None

    def _flag_coefficient_mismatch(self) -> None:
        from filterbank.core.config_manager import get_config

        if get_config().warn_on_coefficient_mismatch:
            logger.warning(f"IIR filter has {len(self._input_coefficients)} input but "
                           f"{len(self._output_coefficients)} output coefficients; "
                           f"results will not be meaningful")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IIRFilter):
            return NotImplemented
        return (self._input_coefficients == other._input_coefficients
                and self._output_coefficients == other._output_coefficients)

    def __hash__(self) -> int:
        return hash((self._input_coefficients, self._output_coefficients))

    def __repr__(self) -> str:
        return (f"IIRFilter(order={self._order}, "
                f"input_coefficients={list(self._input_coefficients)}, "
                f"output_coefficients={list(self._output_coefficients)})")
