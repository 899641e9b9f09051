"""
MIDI pitch filter bank.

A bank holds one elliptic bandpass IIR filter per MIDI pitch, all designed
for the same sample rate. Every filter carries its own history, so a bank
must only ever be fed by a single signal stream.
"""

import logging
from typing import Dict, Iterator, List, Mapping, Optional, Sequence
import numpy as np

from .digital_filter import IIRFilter, as_sample_buffer
from .design.coefficient_tables import (
    midi_pitch_coefficients, is_supported_sample_rate, supported_pitches, SUPPORTED_SAMPLE_RATES
)
from .exceptions import FilterProcessingError, InvalidFilterSpecificationError

logger = logging.getLogger('filterbank.filters.filter_bank')

class MidiFilterBank(Mapping[int, IIRFilter]):
    """
    Ordered, read-only mapping from MIDI pitch to its IIR filter.

    All filters share one sample rate. ``map`` feeds the same buffer to
    every filter and returns the per-pitch outputs.
    """

    def __init__(self, sample_rate: float, filters: Mapping[int, IIRFilter]):
        """
        Initialize filter bank.

        Args:
            sample_rate: Sample rate the filters were designed for
            filters: Filter per MIDI pitch
        """
        self._sample_rate = float(sample_rate)
        self._filters: Dict[int, IIRFilter] = dict(sorted(filters.items()))

        logger.debug(f"MidiFilterBank initialized with {len(self._filters)} filters "
                     f"at {self._sample_rate} Hz")

    @property
    def sample_rate(self) -> float:
        """Sample rate shared by all filters"""
        return self._sample_rate

    @property
    def pitches(self) -> List[int]:
        """MIDI pitches in ascending order"""
        return list(self._filters)

    def map(self, samples: Sequence[float]) -> Dict[int, np.ndarray]:
        """
        Filter a buffer through every pitch filter.

        Args:
            samples: 1D input samples

        Returns:
            Filtered float32 samples per MIDI pitch

        Raises:
            FilterProcessingError: If processing fails
        """
        data = as_sample_buffer(samples)
        try:
            return {pitch: pitch_filter.map(data) for pitch, pitch_filter in self._filters.items()}
        except FilterProcessingError:
            raise
        except Exception as e:
            logger.error(f"MidiFilterBank processing failed: {e}")
            raise FilterProcessingError(f"MidiFilterBank processing error: {e}") from e

    def reset_all_states(self) -> None:
        """Reset state for all filters in the bank"""
        for pitch_filter in self._filters.values():
            pitch_filter.reset()
        logger.debug("Reset all filter states in bank")

    def get_filter_count(self) -> int:
        """Get number of filters in the bank"""
        return len(self._filters)

    def __getitem__(self, pitch: int) -> IIRFilter:
        return self._filters[pitch]

    def __iter__(self) -> Iterator[int]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        pitches = self.pitches
        span = f"{pitches[0]}..{pitches[-1]}" if pitches else "empty"
        return f"MidiFilterBank(sample_rate={self._sample_rate}, pitches={span})"


def create_midi_filter_bank(sample_rate: float,
                            min_pitch: Optional[int] = None,
                            max_pitch: Optional[int] = None) -> MidiFilterBank:
    """
    Create a bank of new pitch filters for ``min_pitch..max_pitch`` inclusive.

    Args:
        sample_rate: One of ``SUPPORTED_SAMPLE_RATES``
        min_pitch: Lowest MIDI pitch. If omitted, the configured default limited
            to the pitches covered at ``sample_rate``
        max_pitch: Highest MIDI pitch. If omitted, the configured default limited
            to the pitches covered at ``sample_rate``

    Returns:
        Filter bank with one IIR filter per pitch

    Raises:
        InvalidFilterSpecificationError: If the pitch range or sample rate is invalid
    """
    if min_pitch is None or max_pitch is None:
        from filterbank.core.config_manager import get_config

        config = get_config()
        coverage = supported_pitches(sample_rate)
        if min_pitch is None:
            min_pitch = max(config.default_min_pitch, coverage.start)
        if max_pitch is None:
            max_pitch = min(config.default_max_pitch, coverage.stop - 1)

    if max_pitch < min_pitch:
        raise InvalidFilterSpecificationError(
            f"max_pitch ({max_pitch}) must not be less than min_pitch ({min_pitch})"
        )
    if not is_supported_sample_rate(sample_rate):
        raise InvalidFilterSpecificationError(
            f"Unsupported sample rate {sample_rate} Hz. Supported: {SUPPORTED_SAMPLE_RATES}"
        )

    # resolve all coefficients first so that no filter is built for a bad range
    coefficients = {
        pitch: midi_pitch_coefficients(sample_rate, pitch)
        for pitch in range(min_pitch, max_pitch + 1)
    }
    filters = {pitch: IIRFilter.from_coefficients(pair) for pitch, pair in coefficients.items()}

    logger.info(f"Created MIDI filter bank for pitches {min_pitch}..{max_pitch} at {sample_rate} Hz")
    return MidiFilterBank(sample_rate, filters)
