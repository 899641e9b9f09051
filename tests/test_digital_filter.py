"""
Unit tests for the direct-form FIR and IIR filters

Tests identity pass-through, impulse responses, stream continuity,
cold start, reset, equality and state invariants.
"""

import logging

import numpy as np
import pytest

from filterbank import IStatefulFilter
from filterbank.filters import (
    FIRFilter, IIRFilter, circular_index,
    FilterProcessingError, FilterStateError, InvalidFilterSpecificationError
)


class TestCircularIndex:
    """Tests for the shared index helper"""

    def test_wraps_forward(self):
        """Test advancing past the end wraps to the start"""
        assert circular_index(4, 4) == 0
        assert circular_index(3, 4) == 3

    def test_wraps_backward(self):
        """Test negative indices wrap to the end"""
        assert circular_index(-1, 4) == 3
        assert circular_index(-4, 4) == 0


class TestFIRFilter:
    """Tests for FIRFilter"""

    def test_default_is_identity(self, sample_input):
        """Test the default filter passes samples through"""
        fir = FIRFilter()

        np.testing.assert_array_equal(fir.coefficients, [1.0])
        assert fir.is_identity
        np.testing.assert_array_equal(fir.map(sample_input), sample_input)

    def test_identity_returns_copy(self):
        """Test identity map does not hand out the input buffer"""
        data = np.array([0.25, -0.5, 0.75], dtype=np.float32)

        out = FIRFilter([1.0]).map(data)

        np.testing.assert_array_equal(out, data)
        assert out is not data
        assert out.dtype == np.float32

    def test_identity_matches_convolution(self):
        """Test the identity fast path matches an equivalent convolution"""
        data = np.random.default_rng(7).uniform(-1, 1, 64).astype(np.float32)

        identity = FIRFilter([1.0]).map(data)
        convolved = FIRFilter([1.0, 0.0, 0.0]).map(data)

        np.testing.assert_array_equal(identity, convolved)

    def test_impulse_response(self):
        """Test an impulse reproduces the coefficients"""
        coefficients = [0.5, -0.25, 0.125, 2.0]
        impulse = [1.0, 0.0, 0.0, 0.0]

        out = FIRFilter(coefficients).map(impulse)

        np.testing.assert_array_equal(out, coefficients)

    def test_convolution(self, sample_input):
        """Test two-tap convolution against hand computed values"""
        out = FIRFilter([1.0, 2.0]).map(sample_input)

        np.testing.assert_allclose(out, [1.0, 4.0, 5.0, 6.0])

    def test_buffer_boundaries_are_transparent(self):
        """Test split buffers filter like one continuous stream"""
        coefficients = [0.1, 0.2, 0.3, 0.2, 0.1]
        data = np.random.default_rng(3).uniform(-1, 1, 50).astype(np.float32)

        whole = FIRFilter(coefficients).map(data)
        split_filter = FIRFilter(coefficients)
        split = np.concatenate([split_filter.map(data[:13]), split_filter.map(data[13:31]),
                                split_filter.map(data[31:])])

        np.testing.assert_array_equal(whole, split)

    def test_reset(self, sample_input):
        """Test reset restores the just-constructed state"""
        fir = FIRFilter([1.0, 2.0])

        output0 = fir.map(sample_input)
        output1 = fir.map(sample_input)
        assert not np.array_equal(output0, output1)

        fir.reset()
        output2 = fir.map(sample_input)

        np.testing.assert_array_equal(output0, output2)

    def test_reset_matches_fresh_filter(self):
        """Test a reset filter behaves like a new one"""
        data = np.random.default_rng(11).uniform(-1, 1, 32).astype(np.float32)
        used = FIRFilter([0.3, 0.3, 0.4])
        used.map(data)
        used.reset()

        np.testing.assert_array_equal(used.map(data), FIRFilter([0.3, 0.3, 0.4]).map(data))

    def test_coefficients_are_copied(self):
        """Test later changes to the source array do not leak in"""
        source = np.array([1.0, 2.0])
        fir = FIRFilter(source)
        source[0] = 5.0

        np.testing.assert_array_equal(fir.coefficients, [1.0, 2.0])
        with pytest.raises(ValueError):
            fir.coefficients[0] = 3.0

    def test_empty_coefficients(self):
        """Test empty coefficients are rejected"""
        with pytest.raises(InvalidFilterSpecificationError):
            FIRFilter([])
        with pytest.raises(ValueError):
            FIRFilter(np.array([]))

    def test_equality_and_hash(self):
        """Test equality is defined by coefficients only"""
        filter0 = FIRFilter([1, 2])
        filter1 = FIRFilter([1, 2])
        filter2 = FIRFilter([1, 3])

        filter1.map([1.0, 5.0, 3.0])

        assert filter0 == filter1
        assert hash(filter0) == hash(filter1)
        assert filter0 != filter2
        assert hash(filter0) != hash(filter2)

    def test_not_equal_to_iir(self):
        """Test FIR and IIR filters never compare equal"""
        assert FIRFilter([1.0]) != IIRFilter([1.0], [1.0])

    def test_repr(self):
        """Test representation lists the coefficients"""
        assert repr(FIRFilter([1, 2])) == "FIRFilter(coefficients=[1.0, 2.0])"

    def test_length(self):
        """Test len is the tap count"""
        assert len(FIRFilter([0.5] * 17)) == 17

    def test_single_sample_filter(self):
        """Test filter() matches map() sample by sample"""
        data = [0.5, -1.0, 0.25, 2.0]
        by_sample = FIRFilter([0.5, 0.5])
        outputs = [by_sample.filter(x) for x in data]

        np.testing.assert_allclose(outputs, FIRFilter([0.5, 0.5]).map(data))

    def test_rejects_multichannel_input(self):
        """Test 2D input is rejected"""
        with pytest.raises(FilterProcessingError):
            FIRFilter([1.0, 0.5]).map(np.zeros((4, 2)))

    def test_empty_buffer(self):
        """Test empty buffers map to empty buffers"""
        assert FIRFilter([1.0, 0.5]).map([]).shape == (0,)
        assert FIRFilter().map([]).shape == (0,)


class TestIIRFilter:
    """Tests for IIRFilter"""

    def test_cold_start_returns_input(self):
        """Test the first sample is returned unchanged whatever the coefficients"""
        iir = IIRFilter([0.3, -1.7, 2.2], [1.0, 0.4, -0.9])
        assert not iir.is_warm

        assert iir.filter(0.3) == 0.3
        assert iir.is_warm

    def test_trivial_pass_through(self, sample_input):
        """Test a=[1], b=[1] passes every sample through"""
        iir = IIRFilter([1.0], [1.0])

        np.testing.assert_array_equal(iir.map(sample_input), sample_input)
        np.testing.assert_array_equal(iir.map([3.0, -2.0]), [3.0, -2.0])

    def test_equal_coefficients_pass_through(self, sample_input):
        """Test a == b cancels to an identity transfer function"""
        iir = IIRFilter([1.0, 1.0], [1.0, 1.0])

        np.testing.assert_allclose(iir.map(sample_input), sample_input, atol=1e-5)

    def test_recurrence(self):
        """Test y[n] = 0.5 x[n] + 0.5 x[n-1] + 0.5 y[n-1] after cold start"""
        iir = IIRFilter([0.5, 0.5], [1.0, -0.5])

        np.testing.assert_allclose(iir.map([1.0, 2.0, 0.0, 0.0]), [1.0, 2.0, 2.0, 1.0])

    def test_first_coefficient_of_a_is_ignored(self, sample_input):
        """Test a[0] never contributes since its history slot is zeroed first"""
        iir = IIRFilter([1.0, 2.0], [0.5, 0.9])

        np.testing.assert_allclose(iir.map(sample_input), [1.0, 3.1, 2.21, 4.011], rtol=1e-6)

    def test_reset(self, sample_input):
        """Test reset returns the filter to the cold state"""
        iir = IIRFilter([1.0, 2.0], [0.5, 0.9])

        output0 = iir.map(sample_input)
        output1 = iir.map(sample_input)
        assert not np.array_equal(output0, output1)

        iir.reset()
        assert not iir.is_warm
        output2 = iir.map(sample_input)

        np.testing.assert_array_equal(output0, output2)

    def test_buffer_boundaries_are_transparent(self):
        """Test split buffers filter like one continuous stream"""
        b, a = [0.2, 0.3, 0.2], [1.0, -0.4, 0.1]
        data = np.random.default_rng(5).uniform(-1, 1, 40).astype(np.float32)

        whole = IIRFilter(b, a).map(data)
        split_filter = IIRFilter(b, a)
        split = np.concatenate([split_filter.map(data[:1]), split_filter.map(data[1:25]),
                                split_filter.map(data[25:])])

        np.testing.assert_array_equal(whole, split)

    def test_inconsistent_history_fails(self):
        """Test exactly one present history is a fatal state error"""
        iir = IIRFilter([1.0, 2.0], [1.0, 0.5])
        iir.filter(1.0)
        iir._output_history = None

        with pytest.raises(FilterStateError):
            iir.filter(2.0)
        with pytest.raises(FilterProcessingError):
            iir.map([2.0])

    def test_equality_and_hash(self):
        """Test equality is defined by both coefficient vectors only"""
        filter0 = IIRFilter([1, 2], [1.0, 2.0])
        filter1 = IIRFilter([1, 2], [1.0, 2.0])
        filter2 = IIRFilter([1, 3], [1.0, 2.0])
        filter3 = IIRFilter([1, 2], [1.0, 3.0])

        filter1.map([0.5, 0.25])

        assert filter0 == filter1
        assert hash(filter0) == hash(filter1)
        assert filter0 != filter2
        assert filter0 != filter3
        assert hash(filter0) != hash(filter2)

    def test_repr(self):
        """Test representation shows order and coefficients"""
        iir = IIRFilter([1, 2], [3, 4])

        assert repr(iir) == "IIRFilter(order=2, input_coefficients=[1.0, 2.0], output_coefficients=[3.0, 4.0])"

    def test_order(self):
        """Test the order is the number of input coefficients"""
        iir = IIRFilter([1.0, 0.0, 0.0], [1.0, 0.0, 0.0])

        assert iir.order == 3
        np.testing.assert_array_equal(iir.input_coefficients, [1.0, 0.0, 0.0])

    def test_empty_input_coefficients(self):
        """Test an empty numerator is rejected"""
        with pytest.raises(InvalidFilterSpecificationError):
            IIRFilter([], [1.0])

    def test_mismatched_lengths_are_flagged(self, caplog):
        """Test differing a/b lengths log a warning but construct"""
        with caplog.at_level(logging.WARNING, logger='filterbank.filters.digital_filter'):
            iir = IIRFilter([0.5, 0.5], [1.0])

        assert iir.order == 2
        assert any('output coefficients' in record.getMessage() for record in caplog.records)

    def test_mismatch_warning_can_be_disabled(self, caplog, monkeypatch):
        """Test the mismatch warning follows configuration"""
        monkeypatch.setenv('FILTERBANK_WARN_ON_COEFFICIENT_MISMATCH', 'false')

        with caplog.at_level(logging.WARNING, logger='filterbank.filters.digital_filter'):
            IIRFilter([0.5, 0.5], [1.0])

        assert not caplog.records

    def test_short_output_coefficients_fail_when_warm(self):
        """Test a too short denominator surfaces as a processing error"""
        iir = IIRFilter([0.5, 0.5], [1.0])

        with pytest.raises(FilterProcessingError):
            iir.map([1.0, 2.0])

    def test_short_output_coefficients_leave_state_untouched(self):
        """Test filter() fails like map() and before advancing the histories"""
        iir = IIRFilter([0.5, 0.5], [1.0])
        assert iir.filter(1.0) == 1.0

        with pytest.raises(FilterProcessingError):
            iir.filter(2.0)

        assert iir._position == 0
        assert iir._input_history == [1.0, 1.0]
        assert iir._output_history == [1.0, 1.0]


class TestStatefulFilterProtocol:
    """Tests for the stateful filter protocol"""

    def test_filters_implement_protocol(self):
        """Test FIR and IIR filters satisfy IStatefulFilter"""
        assert isinstance(FIRFilter(), IStatefulFilter)
        assert isinstance(IIRFilter([1.0], [1.0]), IStatefulFilter)

    def test_interchangeable_streams(self):
        """Test an identity FIR and a trivial IIR process a stream alike"""
        data = [0.25, -0.5, 1.0, 0.0]
        filters = [FIRFilter(), IIRFilter([1.0], [1.0])]

        outputs = [stateful.map(data) for stateful in filters]

        np.testing.assert_array_equal(outputs[0], outputs[1])
