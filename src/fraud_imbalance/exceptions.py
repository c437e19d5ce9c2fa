class SchemaError(ValueError):
    """Input table does not match the expected transaction schema."""


class DegenerateSplitError(ValueError):
    """Dataset cannot be partitioned with stratification."""


class DegenerateResampleError(ValueError):
    """A resampling strategy cannot be applied to the given training set."""


class ModelFitError(RuntimeError):
    """A model cannot be fit on the given training set."""
