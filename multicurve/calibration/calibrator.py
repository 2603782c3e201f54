"""
Reference solver: calibrates one multi-curve bundle against its instruments.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

import numpy as np

from multicurve.curves.base import BaseCurve
from multicurve.errors import StateError, UnsupportedOperationError
from multicurve.market.currency import Currency
from multicurve.market.indices import IborIndex, OvernightIndex
from multicurve.market.legal_entity import IssuerFilterPair
from multicurve.provider.issuer import IssuerProvider
from multicurve.provider.multicurve import MulticurveProvider
from multicurve.provider.sensitivity import CurveBuildingBlock, SensitivityBundle

from .bundles import MultiCurveBundle, SingleCurveBundle
from .calculators import FiniteDifferenceSensitivityCalculator, ParSpreadMarketQuoteCalculator
from .root_finding import get_root_finder, solve_or_raise

logger = logging.getLogger(__name__)


class CurveCalibrator:
    """Solves the par-spread equations of one calibration unit.

    ``calibrate`` returns the provider holding the known curves plus the
    calibrated ones, and the known sensitivity bundle extended with one entry
    per calibrated curve: the rows of the pseudo-inverse of the converged
    Jacobian belonging to that curve. When curves were calibrated before, the
    rows are chained through their sensitivities so that each matrix covers
    the quotes of every earlier curve followed by the unit's own quotes.

    Within a unit, spread curves are generated after their base curves.
    """

    def __init__(
        self,
        absolute_tolerance: float = 1e-12,
        relative_tolerance: float = 1e-12,
        max_steps: int = 100,
        method: str = "Broyden",
    ):
        self.absolute_tolerance = absolute_tolerance
        self.relative_tolerance = relative_tolerance
        self.max_steps = max_steps
        self.method = method
        self._finder = get_root_finder(method)

    @classmethod
    def from_settings(cls, settings) -> "CurveCalibrator":
        return cls(
            settings.absolute_tolerance,
            settings.relative_tolerance,
            settings.max_steps,
            settings.method_name,
        )

    def calibrate(
        self,
        unit: MultiCurveBundle,
        known_data: MulticurveProvider,
        known_bundle: Optional[SensitivityBundle],
        discounting: Mapping[str, object],
        ibor: Mapping[str, Sequence[IborIndex]],
        overnight: Mapping[str, Sequence[OvernightIndex]],
        calculator: ParSpreadMarketQuoteCalculator,
        sensitivity_calculator: FiniteDifferenceSensitivityCalculator,
        issuers: Optional[Mapping[str, Sequence[IssuerFilterPair]]] = None,
    ) -> Tuple[MulticurveProvider, SensitivityBundle]:
        instruments = unit.instruments
        logger.info(
            "Calibrating %s with %s instruments (%s)",
            unit.curve_names, len(instruments), self.method,
        )
        order = generation_order(unit)

        def provider_for(
            parameters: np.ndarray, known: MulticurveProvider = known_data
        ) -> MulticurveProvider:
            provider = known.copy()
            by_name = dict(zip(unit.curve_names, unit.split(parameters)))
            for bundle in order:
                name = bundle.curve_name
                curve = bundle.generator.generate_curve(name, by_name[name], provider)
                _install(provider, name, curve, discounting, ibor, overnight, issuers)
            return provider

        def residuals(parameters: np.ndarray, known: MulticurveProvider = known_data) -> np.ndarray:
            provider = provider_for(parameters, known)
            return np.array([calculator(instrument, provider) for instrument in instruments])

        def jacobian(parameters: np.ndarray, value: np.ndarray) -> np.ndarray:
            return sensitivity_calculator.jacobian(residuals, parameters, value)

        result = solve_or_raise(
            self._finder,
            residuals,
            unit.initial_guess,
            jacobian,
            abs_tol=self.absolute_tolerance,
            rel_tol=self.relative_tolerance,
            max_steps=self.max_steps,
        )
        logger.info(
            "Calibrated %s in %s iterations (max residual %.3e)",
            unit.curve_names, result.iterations, result.residual,
        )

        root = result.root
        provider = provider_for(root)
        value = residuals(root)
        inverse = np.linalg.pinv(jacobian(root, value))

        # Columns: quotes of the curves already calibrated, then this unit's quotes
        quotes = _known_quote_sizes(known_bundle)
        if quotes:
            dependency = _known_dependency(
                known_bundle, known_data, quotes, residuals, root, value, sensitivity_calculator
            )
            inverse = np.hstack([-inverse @ dependency, inverse])
        quotes.update((bundle.curve_name, len(bundle.instruments)) for bundle in unit.bundles)
        block = CurveBuildingBlock.from_sizes(quotes)

        rows = CurveBuildingBlock.from_sizes(unit.sizes)
        bundle = known_bundle.copy() if known_bundle is not None else SensitivityBundle()
        for name in unit.curve_names:
            start, count = rows.start(name), rows.count(name)
            bundle.add(name, block, inverse[start:start + count, :])
        return provider, bundle


def generation_order(unit: MultiCurveBundle) -> List[SingleCurveBundle]:
    """Curves of ``unit`` with every spread base ahead of the curves built over it."""
    bundles = {bundle.curve_name: bundle for bundle in unit.bundles}
    ordered: List[SingleCurveBundle] = []
    done: Set[str] = set()
    visiting: List[str] = []

    def visit(name: str) -> None:
        if name in done:
            return
        if name in visiting:
            raise StateError(f"Spread curves {visiting} are built over each other")
        visiting.append(name)
        bundle = bundles[name]
        base = getattr(bundle.generator, "base_curve_name", None)
        if base in bundles:
            visit(base)
        visiting.remove(name)
        done.add(name)
        ordered.append(bundle)

    for name in bundles:
        visit(name)
    return ordered


def _known_quote_sizes(known_bundle: Optional[SensitivityBundle]) -> Dict[str, int]:
    sizes: Dict[str, int] = {}
    for block, _ in (known_bundle.entries.values() if known_bundle is not None else ()):
        for name, _, count in block.layout:
            if sizes.setdefault(name, count) != count:
                raise StateError(f"Inconsistent number of quotes for curve {name}")
    return sizes


def _known_dependency(
    known_bundle: SensitivityBundle,
    known_data: MulticurveProvider,
    quotes: Mapping[str, int],
    residuals: Callable[..., np.ndarray],
    root: np.ndarray,
    value: np.ndarray,
    sensitivity_calculator: FiniteDifferenceSensitivityCalculator,
) -> np.ndarray:
    """Sensitivity of the unit's residuals to the quotes of the known curves.

    Each known curve's parameters are bumped in ``known_data`` with the unit
    held at ``root``; the result is chained with that curve's own quote
    sensitivities from ``known_bundle``.
    """
    columns = CurveBuildingBlock.from_sizes(quotes)
    dependency = np.zeros((len(value), columns.total))
    for name, (block, matrix) in known_bundle.entries.items():
        curve = known_data.get_curve(name)
        if curve is None:
            logger.debug("Known curve %s is not in the provider; skipped", name)
            continue
        parameters = curve.parameters
        if not len(parameters):
            logger.warning("Curve %s has no parameters; its sensitivities are not chained", name)
            continue
        if len(parameters) != matrix.shape[0]:
            raise StateError(
                f"Curve {name} has {len(parameters)} parameters but "
                f"{matrix.shape[0]} rows of known sensitivities"
            )

        def bumped(values: np.ndarray, name=name, curve=curve) -> np.ndarray:
            known = known_data.copy()
            known.replace_curve(name, curve.with_parameters(values))
            return residuals(root, known)

        local = sensitivity_calculator.jacobian(bumped, parameters, value)
        expanded = np.zeros((matrix.shape[0], columns.total))
        for quoted, start, count in block.layout:
            target = columns.start(quoted)
            expanded[:, target:target + count] = matrix[:, start:start + count]
        dependency += local @ expanded
    return dependency


def _install(
    provider: MulticurveProvider,
    name: str,
    curve: BaseCurve,
    discounting: Mapping[str, object],
    ibor: Mapping[str, Sequence[IborIndex]],
    overnight: Mapping[str, Sequence[OvernightIndex]],
    issuers: Optional[Mapping[str, Sequence[IssuerFilterPair]]],
) -> None:
    """Register ``curve`` under every usage declared for ``name``."""
    used = False
    if name in discounting:
        currency = discounting[name]
        if not isinstance(currency, Currency):
            raise UnsupportedOperationError(
                f"Curve {name} discounts {currency!r}; only currencies are supported"
            )
        provider.set_discounting_curve(currency, curve)
        used = True
    for index in ibor.get(name, ()):
        provider.set_ibor_curve(index, curve)
        used = True
    for index in overnight.get(name, ()):
        provider.set_overnight_curve(index, curve)
        used = True
    for pair in (issuers or {}).get(name, ()):
        if not isinstance(provider, IssuerProvider):
            raise StateError(f"Issuer curve {name} needs an issuer provider")
        provider.set_issuer_curve(pair, curve)
        used = True
    if not used:
        provider.set_curve(name, curve)
