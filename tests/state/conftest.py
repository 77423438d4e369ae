"""Fixtures for state module tests."""

import pytest


@pytest.fixture
def compute_state(year_2025):
    """Compute the federal return, then the return's first listed state."""

    def compute(tax_return, state_code=None):
        federal = year_2025.compute_form1040(tax_return)
        state_config = tax_return.states[0]
        module = year_2025.state_module(state_code or state_config.state_code)
        return module.compute(tax_return, federal, state_config)

    return compute
