"""Exceptions raised by the tax computation engine.

Only configuration faults are raised. Unmodeled features and suspicious
input never raise; they surface as validation findings instead.
"""

from typing import Iterable, Sequence


class TaxEngineError(Exception):
    """Base class for engine errors."""


class ConfigurationError(TaxEngineError):
    """The engine's static configuration is unusable."""


class UnsupportedTaxYearError(ConfigurationError):
    """No year module is registered for the requested tax year."""

    def __init__(self, tax_year: int, supported_years: Sequence[int]):
        self.tax_year = tax_year
        self.supported_years = tuple(supported_years)
        supported = ", ".join(str(y) for y in self.supported_years)
        super().__init__(
            f"No rules module registered for tax year {tax_year}. "
            f"Supported years: {supported}"
        )


class MalformedBracketTableError(ConfigurationError):
    """A bracket table is empty, unordered, or carries an invalid rate."""


class TaxParameterError(ConfigurationError):
    """A tax parameter file is missing, unreadable, or incomplete."""


class TraceCycleError(TaxEngineError):
    """The traced value graph contains a cycle."""

    def __init__(self, node_ids: Iterable[str]):
        self.node_ids = sorted(node_ids)
        super().__init__(f"Cycle detected involving: {', '.join(self.node_ids)}")
