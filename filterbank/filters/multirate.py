"""
Multirate filters for decimating, interpolating and resampling.

All three combine a FIR lowpass with a sample rate change and only compute
the convolutions whose results are kept. Interpolation and resampling use a
polyphase decomposition of the lowpass, so the zeros inserted by upsampling
are never multiplied.
"""

import logging
import math
from typing import List, Optional, Sequence, Union
import numpy as np

from .digital_filter import FIRFilter, as_sample_buffer
from .design.coefficient_tables import fir1_16th_order_lowpass
from .exceptions import InvalidFilterSpecificationError

logger = logging.getLogger('filterbank.filters.multirate')

Coefficients = Union[FIRFilter, Sequence[float]]

def _resolve_taps(coefficients: Optional[Coefficients], factor: int) -> np.ndarray:
    if coefficients is None:
        return np.array(fir1_16th_order_lowpass(factor), dtype=np.float64)
    if isinstance(coefficients, FIRFilter):
        return coefficients.coefficients
    return np.asarray(coefficients, dtype=np.float64).ravel()

def _require_factor(name: str, factor: int) -> None:
    if factor < 1:
        raise InvalidFilterSpecificationError(f"{name} must be a positive integer, got {factor}")

def _polyphase_filters(taps: np.ndarray, factor: int) -> List[FIRFilter]:
    """Split ``taps`` into ``factor`` sub-filters, zero padding to a multiple of ``factor``"""
    if len(taps) == 0:
        raise InvalidFilterSpecificationError("Polyphase filter requires at least one coefficient")
    padded_length = -(-len(taps) // factor) * factor
    padded = np.zeros(padded_length, dtype=np.float64)
    padded[:len(taps)] = taps
    return [FIRFilter(padded[phase::factor]) for phase in range(factor)]


class Decimator:
    """
    Lowpass filter followed by keeping every ``factor``-th sample.

    Only kept samples are convolved; dropped samples still enter the delay
    line. The decimation phase carries over between calls.
    """

    def __init__(self, factor: int, coefficients: Optional[Coefficients] = None):
        """
        Initialize decimator.

        Args:
            factor: Keep every ``factor``-th sample
            coefficients: FIR taps or filter, defaults to the 16th order lowpass for ``factor``

        Raises:
            InvalidFilterSpecificationError: If no default lowpass exists for ``factor``
        """
        _require_factor('factor', factor)
        self._factor = factor
        self._filter = FIRFilter(_resolve_taps(coefficients, factor))
        self._position = 0

        logger.debug(f"Initialized decimator (factor: {factor}, taps: {len(self._filter)})")

    @property
    def factor(self) -> int:
        """Factor by which the signal is downsampled"""
        return self._factor

    def map(self, samples: Sequence[float]) -> np.ndarray:
        data = as_sample_buffer(samples)
        out = []
        for sample in data.tolist():
            self._filter.add_to_delay_line(sample)
            if self._position == 0:
                out.append(self._filter.convolve())
            self._position = (self._position + 1) % self._factor
        return np.array(out, dtype=np.float32)

    def reset(self) -> None:
        self._filter.reset()
        self._position = 0

    def __repr__(self) -> str:
        return f"Decimator(factor={self._factor})"


class Interpolator:
    """
    Zero-stuffing upsampler followed by a lowpass filter.

    Output equals filtering the zero-stuffed signal with the full lowpass.
    """

    def __init__(self, factor: int, coefficients: Optional[Coefficients] = None):
        """
        Initialize interpolator.

        Args:
            factor: Upsample factor
            coefficients: FIR taps or filter, defaults to the 16th order lowpass for ``factor``.
                Taps are zero padded to a multiple of ``factor``.

        Raises:
            InvalidFilterSpecificationError: If no default lowpass exists for ``factor``
        """
        _require_factor('factor', factor)
        self._factor = factor
        self._filters = _polyphase_filters(_resolve_taps(coefficients, factor), factor)

        logger.debug(f"Initialized interpolator (factor: {factor})")

    @property
    def factor(self) -> int:
        """Upsample factor"""
        return self._factor

    def map(self, samples: Sequence[float]) -> np.ndarray:
        data = as_sample_buffer(samples)
        factor = self._factor
        out = np.empty(data.shape[0] * factor, dtype=np.float32)
        for i, sample in enumerate(data.tolist()):
            for phase, phase_filter in enumerate(self._filters):
                phase_filter.add_to_delay_line(sample)
                out[i * factor + phase] = phase_filter.convolve()
        return out

    def reset(self) -> None:
        for phase_filter in self._filters:
            phase_filter.reset()

    def __repr__(self) -> str:
        return f"Interpolator(factor={self._factor})"


class Resampler:
    """
    Rational resampler: upsample, lowpass, downsample.

    Up and down factors are reduced by their greatest common divisor.
    Samples that would be dropped by downsampling are never computed.
    """

    def __init__(self, up_factor: int, down_factor: int, coefficients: Optional[Coefficients] = None):
        """
        Initialize resampler.

        Args:
            up_factor: Upsample factor
            down_factor: Downsample factor
            coefficients: FIR taps or filter appropriate for the factors. Defaults to
                the 16th order lowpass for ``max(up_factor, down_factor)`` after reduction.

        Raises:
            InvalidFilterSpecificationError: If no default lowpass exists for the factors
        """
        _require_factor('up_factor', up_factor)
        _require_factor('down_factor', down_factor)
        gcd = math.gcd(up_factor, down_factor)
        self._up_factor = up_factor // gcd
        self._down_factor = down_factor // gcd
        taps = _resolve_taps(coefficients, max(self._up_factor, self._down_factor))
        self._filters = _polyphase_filters(taps, self._up_factor)
        # upsampled index of the next input sample, modulo the down factor
        self._offset = 0

        logger.debug(f"Initialized resampler (factor: {self._up_factor}/{self._down_factor})")

    @property
    def up_factor(self) -> int:
        return self._up_factor

    @property
    def down_factor(self) -> int:
        return self._down_factor

    @property
    def factor(self) -> float:
        """Resampling factor"""
        return self._up_factor / self._down_factor

    def map(self, samples: Sequence[float]) -> np.ndarray:
        data = as_sample_buffer(samples)
        up, down = self._up_factor, self._down_factor
        out = []
        for sample in data.tolist():
            for phase, phase_filter in enumerate(self._filters):
                phase_filter.add_to_delay_line(sample)
                if (self._offset + phase) % down == 0:
                    out.append(phase_filter.convolve())
            self._offset = (self._offset + up) % down
        return np.array(out, dtype=np.float32)

    def reset(self) -> None:
        for phase_filter in self._filters:
            phase_filter.reset()
        self._offset = 0

    def __repr__(self) -> str:
        return f"Resampler(factor={self._up_factor}/{self._down_factor} ({self.factor:g}))"
