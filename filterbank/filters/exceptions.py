"""
Filter-specific exceptions for the pitch filter bank.
"""

class FilterError(Exception):
    """Base class for all filter errors"""
    pass

class FilterDesignError(FilterError):
    """Raised when filter design or construction fails"""
    pass

class FilterProcessingError(FilterError):
    """Raised when filter processing fails"""
    pass

class InvalidFilterSpecificationError(FilterDesignError, ValueError):
    """Raised when coefficients, factors, sample rates or pitch ranges are invalid"""
    pass

class UnsupportedFilterTypeError(InvalidFilterSpecificationError):
    """Raised when requested filter type or response is not supported"""
    pass

class FilterInstabilityError(FilterDesignError):
    """Raised when designed filter is unstable"""
    pass

class FilterStateError(FilterProcessingError):
    """Raised when a filter's runtime state is internally inconsistent"""
    pass
