"""
Coefficient design using scipy.signal.

This module designs the fixed coefficient sets the filter bank is built
from: Hamming-window FIR lowpasses (MATLAB ``fir1`` equivalent), Butterworth
and elliptic lowpasses, and the narrow elliptic bandpasses of the MIDI
pitch filter bank. Designs are computed once and cached.
"""

import logging
import hashlib
from typing import Dict
import numpy as np
from scipy import signal

from filterbank.interfaces import (
    IFilterDesigner, FilterSpecification,
    FilterCoefficients, FilterType, FilterResponse
)
from ..exceptions import (
    FilterDesignError, InvalidFilterSpecificationError,
    FilterInstabilityError, UnsupportedFilterTypeError
)

logger = logging.getLogger('filterbank.filters.design.filter_designer')

class ScipyFilterDesigner:
    """
    Filter designer using scipy.signal.

    Maps each filter type to a design strategy and validates the
    specification and, for IIR designs, the pole locations.
    """

    def __init__(self):
        """Initialize filter designer with strategy mapping"""
        self._design_strategies = {
            FilterType.BUTTERWORTH: self._design_butterworth,
            FilterType.ELLIPTIC: self._design_elliptic,
            FilterType.FIR: self._design_fir,
        }

        self._max_order = 20
        self._min_order = 1
        # Poles must lie strictly inside this radius
        self._stability_margin = 1.0

        logger.debug("ScipyFilterDesigner initialized")

    def design_filter(self, spec: FilterSpecification, check_stability: bool = True) -> FilterCoefficients:
        """
        Design filter using appropriate strategy with validation.

        Args:
            spec: Filter specification parameters
            check_stability: Reject IIR designs with poles outside the unit circle

        Returns:
            Designed filter coefficients

        Raises:
            InvalidFilterSpecificationError: If specification is invalid
            UnsupportedFilterTypeError: If filter type not supported
            FilterDesignError: If design fails
            FilterInstabilityError: If designed filter is unstable
        """
        try:
            if not self.validate_specification(spec):
                raise InvalidFilterSpecificationError(f"Invalid filter specification: {spec}")

            design_func = self._design_strategies.get(spec.filter_type)
            if not design_func:
                raise UnsupportedFilterTypeError(f"Filter type {spec.filter_type} not implemented")

            logger.debug(f"Designing {spec.filter_type.value} {spec.response_type.value} filter, "
                         f"order={spec.order}, fc={spec.cutoff_frequencies}, fs={spec.sample_rate}")

            coefficients = design_func(spec)

            if check_stability and spec.filter_type != FilterType.FIR:
                self._validate_stability(coefficients)

            return coefficients

        except (InvalidFilterSpecificationError, FilterInstabilityError):
            raise
        except Exception as e:
            logger.error(f"Filter design failed: {e}")
            raise FilterDesignError(f"Failed to design filter: {e}") from e

    def validate_specification(self, spec: FilterSpecification) -> bool:
        """
        Validation of filter specification.

        Args:
            spec: Filter specification to validate

        Returns:
            True if specification is valid
        """
        if not (self._min_order <= spec.order <= self._max_order):
            logger.error(f"Filter order must be between {self._min_order} and {self._max_order}")
            return False

        nyquist = spec.sample_rate / 2
        for freq in spec.cutoff_frequencies:
            if freq <= 0 or freq >= nyquist:
                logger.error(f"Cutoff frequency {freq} must be between 0 and {nyquist} Hz")
                return False

        if spec.response_type == FilterResponse.BANDPASS:
            if len(spec.cutoff_frequencies) != 2:
                logger.error("Bandpass filters require exactly 2 cutoff frequencies")
                return False
            if spec.cutoff_frequencies[0] >= spec.cutoff_frequencies[1]:
                logger.error("Lower cutoff must be less than upper cutoff")
                return False
        elif len(spec.cutoff_frequencies) != 1:
            logger.error("Lowpass filters require exactly 1 cutoff frequency")
            return False

        if spec.filter_type == FilterType.ELLIPTIC:
            if spec.ripple_db <= 0 or spec.ripple_db > 10:
                logger.error("Passband ripple must be between 0 and 10 dB")
                return False
            if spec.attenuation_db <= 0 or spec.attenuation_db > 120:
                logger.error("Stopband attenuation must be between 0 and 120 dB")
                return False

        return True

    def _design_butterworth(self, spec: FilterSpecification) -> FilterCoefficients:
        """Design Butterworth filter using scipy.signal.butter"""
        b, a = signal.butter(
            spec.order,
            self._critical_frequencies(spec),
            btype=spec.response_type.value,
            analog=False,
            output='ba'
        )

        return FilterCoefficients(numerator=b, denominator=a)

    def _design_elliptic(self, spec: FilterSpecification) -> FilterCoefficients:
        """Design elliptic filter using scipy.signal.ellip"""
        b, a = signal.ellip(
            spec.order,
            spec.ripple_db,
            spec.attenuation_db,
            self._critical_frequencies(spec),
            btype=spec.response_type.value,
            analog=False,
            output='ba'
        )

        return FilterCoefficients(numerator=b, denominator=a)

    def _design_fir(self, spec: FilterSpecification) -> FilterCoefficients:
        """Design Hamming-window FIR filter using scipy.signal.firwin"""
        if spec.response_type != FilterResponse.LOWPASS:
            raise UnsupportedFilterTypeError(f"FIR {spec.response_type.value} not supported")

        # order + 1 taps, Hamming window, unity gain at DC (MATLAB fir1)
        b = signal.firwin(spec.order + 1, spec.normalized_cutoff[0], window='hamming', scale=True)

        return FilterCoefficients(numerator=b, denominator=np.array([1.0]))

    @staticmethod
    def _critical_frequencies(spec: FilterSpecification):
        normalized_cutoff = spec.normalized_cutoff
        if spec.response_type == FilterResponse.BANDPASS:
            return list(normalized_cutoff)
        return normalized_cutoff[0]

    def _validate_stability(self, coefficients: FilterCoefficients) -> None:
        """
        Validate filter stability by checking pole locations.

        Args:
            coefficients: Filter coefficients to validate

        Raises:
            FilterInstabilityError: If filter is unstable
        """
        if len(coefficients.denominator) < 2:
            return

        poles = np.roots(coefficients.denominator)
        pole_magnitudes = np.abs(poles)
        max_pole_magnitude = np.max(pole_magnitudes)

        if max_pole_magnitude >= self._stability_margin:
            unstable_poles = poles[pole_magnitudes >= self._stability_margin]
            raise FilterInstabilityError(
                f"Filter is unstable. Poles outside stability margin: {unstable_poles}"
            )

        logger.debug(f"Filter is stable. Max pole magnitude: {max_pole_magnitude:.6f}")


class FilterDesignService:
    """
    Domain service for filter design operations with caching.

    Every distinct specification is designed once; later requests return
    the same immutable coefficient object.
    """

    def __init__(self, designer: IFilterDesigner):
        """
        Initialize filter design service.

        Args:
            designer: Filter designer implementation
        """
        self._designer = designer
        self._coefficient_cache: Dict[str, FilterCoefficients] = {}
        self._cache_hits = 0
        self._cache_misses = 0

        logger.debug("FilterDesignService initialized")

    def get_or_create_filter(self, spec: FilterSpecification, check_stability: bool = True) -> FilterCoefficients:
        """
        Get cached filter coefficients or create new ones.

        Args:
            spec: Filter specification
            check_stability: Passed on to the designer on a cache miss

        Returns:
            Filter coefficients (cached or newly designed)
        """
        cache_key = self._generate_cache_key(spec)

        cached = self._coefficient_cache.get(cache_key)
        if cached is not None:
            self._cache_hits += 1
            return cached

        self._cache_misses += 1
        logger.debug(f"Cache miss for filter: {cache_key}")

        coefficients = self._designer.design_filter(spec, check_stability=check_stability)
        self._coefficient_cache[cache_key] = coefficients

        return coefficients

    def clear_cache(self) -> None:
        """Clear filter coefficient cache and reset statistics"""
        cache_size = len(self._coefficient_cache)
        self._coefficient_cache.clear()

        logger.info(f"Cleared filter cache ({cache_size} entries). "
                    f"Cache stats: {self._cache_hits} hits, {self._cache_misses} misses")

        self._cache_hits = 0
        self._cache_misses = 0

    def get_cache_stats(self) -> Dict[str, float]:
        """Get cache performance statistics"""
        total_requests = self._cache_hits + self._cache_misses
        hit_rate = (self._cache_hits / total_requests * 100) if total_requests > 0 else 0

        return {
            'cache_size': len(self._coefficient_cache),
            'cache_hits': self._cache_hits,
            'cache_misses': self._cache_misses,
            'hit_rate_percent': round(hit_rate, 2)
        }

    def _generate_cache_key(self, spec: FilterSpecification) -> str:
        """
        Generate unique cache key for filter specification.

        Args:
            spec: Filter specification

        Returns:
            Unique cache key string
        """
        key_data = (
            spec.filter_type.value,
            spec.response_type.value,
            spec.cutoff_frequencies,
            spec.sample_rate,
            spec.order,
            spec.ripple_db,
            spec.attenuation_db
        )

        key_string = str(key_data)
        return hashlib.md5(key_string.encode()).hexdigest()
