"""State module lookup for one tax year."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Mapping, Type

from calculator.state.modules.california import CaliforniaModule
from calculator.state.modules.illinois import IllinoisModule
from calculator.state.modules.no_income_tax import NoIncomeTaxModule
from calculator.state.modules.pennsylvania import PennsylvaniaModule
from calculator.state.state_module import StateModule
from calculator.state.state_tax_config import StateTaxConfig

logger = logging.getLogger(__name__)


# States without income tax
NO_INCOME_TAX_STATES = frozenset({
    "AK",  # Alaska
    "FL",  # Florida
    "NV",  # Nevada
    "SD",  # South Dakota
    "TX",  # Texas
    "WA",  # Washington
    "WY",  # Wyoming
    "TN",  # Tennessee (no tax on wages)
    "NH",  # New Hampshire (no tax on wages)
})

# State code -> module class for states that levy an income tax
STATE_MODULE_CLASSES: Mapping[str, Type[StateModule]] = MappingProxyType({
    "CA": CaliforniaModule,
    "IL": IllinoisModule,
    "PA": PennsylvaniaModule,
})


def module_class_for(config: StateTaxConfig) -> Type[StateModule]:
    if not config.has_income_tax or config.state_code in NO_INCOME_TAX_STATES:
        return NoIncomeTaxModule
    return STATE_MODULE_CLASSES[config.state_code]


def build_state_modules(configs: Mapping[str, StateTaxConfig]) -> Mapping[str, StateModule]:
    """
    Instantiate one module per configured state.

    States with parameters but no module class are left out with a
    warning; they are reported as unsupported when a return asks for them.

    Args:
        configs: StateTaxConfig per state code for a single tax year

    Returns:
        Read-only mapping of state code to StateModule
    """
    modules: Dict[str, StateModule] = {}
    for code, config in sorted(configs.items()):
        if config.has_income_tax and code not in STATE_MODULE_CLASSES:
            logger.warning(f"No state module for {code} ({config.tax_year}); parameters ignored")
            continue
        modules[code] = module_class_for(config)(config)
    return MappingProxyType(modules)
