class SplitStatsError(ValueError):
    """Base class for contract violations raised by splitstats."""


class InvalidObservationError(SplitStatsError):
    """Counts that cannot describe a real variant (negative, or conversions > views)."""


class InsufficientVariantsError(SplitStatsError):
    """A multi-variant operation received fewer than two variants."""


class InvalidParameterError(SplitStatsError):
    """A planning, prior or probability argument is outside its valid range."""
