"""
Curve set-up builder.

Accumulates the curves to build, their calibration order, descriptors and
nodes, known data and root-finder settings; ``finalize`` validates the whole
set-up and freezes it into a ``CurveBuilder``.

Example::

    builder = (
        CurveSetUpBuilder()
        .declare_first_stage("USD-DSC")
        .declare_next_stage("USD-3M")
        .configure("USD-DSC").for_discounting(USD).with_interpolator("LINEAR").done()
        .configure("USD-3M").for_index(USD_LIBOR_3M).with_interpolator("LINEAR")
        .as_spread_over("USD-DSC").done()
    )
    for node in deposits:
        builder.add_node("USD-DSC", node)
    curves, sensitivities = builder.finalize().build_curves(valuation_date)
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from multicurve.errors import ConfigurationError, StateError
from multicurve.instruments.definitions import InstrumentDefinition
from multicurve.market.currency import Currency
from multicurve.market.fx import FxMatrix
from multicurve.market.indices import IborIndex, OvernightIndex
from multicurve.provider.hull_white import HullWhiteParameters
from multicurve.provider.sensitivity import SensitivityBundle

from .builder import CurveBuilder
from .descriptor import CurveTypeDescriptor, PreConstructedCurveEntry
from .flavors import CurveFlavor, DiscountingFlavor, HullWhiteFlavor
from .settings import (
    RootFinderSettings,
    validate_max_steps,
    validate_method_name,
    validate_tolerance,
)

logger = logging.getLogger(__name__)


def _check_names(names: Sequence[str]) -> List[str]:
    if not names:
        raise ConfigurationError("No curve names given")
    if any(not name for name in names):
        raise ConfigurationError(f"Curve names must be non-empty strings: {list(names)}")
    if len(set(names)) != len(names):
        raise ConfigurationError(f"Duplicate curve names: {list(names)}")
    return list(names)


def _describe(label: str, names) -> str:
    return f"{label} [{', '.join(sorted(names))}]"


class CurveSetUpBuilder:
    """Mutable curve set-up; not thread-safe."""

    def __init__(self, flavor: Optional[CurveFlavor] = None):
        self.flavor = flavor if flavor is not None else DiscountingFlavor()
        self._stages: List[List[str]] = []
        self._simultaneous = False
        self._descriptors: Dict[str, CurveTypeDescriptor] = {}
        self._nodes: Dict[str, Optional[List[InstrumentDefinition]]] = {}
        self._preconstructed: List[PreConstructedCurveEntry] = []
        self._fx_matrix = FxMatrix()
        self._known_bundle: Optional[SensitivityBundle] = None
        self._settings = RootFinderSettings()

    # ------------------------------------------------------------------
    # Build order
    # ------------------------------------------------------------------
    def declare_simultaneous(self, *names: str) -> "CurveSetUpBuilder":
        """Calibrate all ``names`` together in a single stage."""
        if self._stages:
            raise ConfigurationError("Curves to build have already been configured")
        self._stages = [_check_names(names)]
        self._simultaneous = True
        return self

    def declare_first_stage(self, *names: str) -> "CurveSetUpBuilder":
        if self._stages:
            raise ConfigurationError("Curves to build have already been configured")
        self._stages = [_check_names(names)]
        return self

    def declare_next_stage(self, *names: str) -> "CurveSetUpBuilder":
        if not self._stages:
            raise ConfigurationError("First stage missing: call declare_first_stage first")
        if self._simultaneous:
            raise ConfigurationError("Curves to build have already been configured simultaneously")
        names = _check_names(names)
        already = set(names) & set(self.curve_names)
        if already:
            raise ConfigurationError(_describe("Curves already declared in an earlier stage:", already))
        self._stages.append(names)
        return self

    @property
    def stages(self) -> List[List[str]]:
        return [list(stage) for stage in self._stages]

    @property
    def curve_names(self) -> List[str]:
        return [name for stage in self._stages for name in stage]

    # ------------------------------------------------------------------
    # Curves
    # ------------------------------------------------------------------
    def configure(self, name: str) -> CurveTypeDescriptor:
        if not name:
            raise ConfigurationError("Curve name must be a non-empty string")
        if name in self._descriptors:
            raise ConfigurationError(f"Curve {name} has already been configured")
        descriptor = CurveTypeDescriptor(name, self.flavor, owner=self)
        self._descriptors[name] = descriptor
        return descriptor

    def use_preconstructed(self, curve) -> PreConstructedCurveEntry:
        entry = PreConstructedCurveEntry(curve, owner=self)
        self._preconstructed.append(entry)
        return entry

    def add_node(self, name: str, definition: InstrumentDefinition) -> "CurveSetUpBuilder":
        if not name:
            raise ConfigurationError("Curve name must be a non-empty string")
        if definition is None:
            raise ConfigurationError(f"Node for curve {name} is None")
        nodes = self._nodes.get(name)
        if nodes is None:
            nodes = self._nodes[name] = []
        nodes.append(definition)
        return self

    def add_nodes(self, name: str, definitions: Sequence[InstrumentDefinition]) -> "CurveSetUpBuilder":
        for definition in definitions:
            self.add_node(name, definition)
        return self

    def remove_nodes(self, name: str) -> "CurveSetUpBuilder":
        """Drop the nodes of ``name``; the curve stays declared without a node list."""
        if name in self._nodes:
            self._nodes[name] = None
        return self

    def remove_curve(self, name: str) -> "CurveSetUpBuilder":
        """Remove ``name`` from every stage along with its nodes and descriptor."""
        stages = [[n for n in stage if n != name] for stage in self._stages]
        self._stages = [stage for stage in stages if stage]
        if not self._stages:
            self._simultaneous = False
        self._nodes.pop(name, None)
        self._descriptors.pop(name, None)
        return self

    # ------------------------------------------------------------------
    # Known data
    # ------------------------------------------------------------------
    def add_fx_matrix(self, fx_matrix: FxMatrix) -> "CurveSetUpBuilder":
        if fx_matrix is None:
            raise ConfigurationError("FX matrix is None")
        self._fx_matrix = fx_matrix.copy()
        return self

    def with_known_sensitivity_bundle(self, bundle: SensitivityBundle) -> "CurveSetUpBuilder":
        """Add ``bundle`` to the known sensitivities; later bundles win per curve."""
        if bundle is None:
            raise ConfigurationError("Sensitivity bundle is None")
        if self._known_bundle is None:
            self._known_bundle = bundle.copy()
        else:
            self._known_bundle = self._known_bundle.add_all(bundle)
        return self

    # ------------------------------------------------------------------
    # Root finder
    # ------------------------------------------------------------------
    def root_finding_absolute_tolerance(self, tolerance: float) -> "CurveSetUpBuilder":
        validate_tolerance(tolerance, "Absolute tolerance")
        self._settings = replace(self._settings, absolute_tolerance=tolerance)
        return self

    def root_finding_relative_tolerance(self, tolerance: float) -> "CurveSetUpBuilder":
        validate_tolerance(tolerance, "Relative tolerance")
        self._settings = replace(self._settings, relative_tolerance=tolerance)
        return self

    def root_finding_maximum_steps(self, max_steps: int) -> "CurveSetUpBuilder":
        self._settings = replace(self._settings, max_steps=validate_max_steps(max_steps))
        return self

    def root_finding_method_name(self, method_name: str) -> "CurveSetUpBuilder":
        self._settings = replace(self._settings, method_name=validate_method_name(method_name))
        return self

    def root_finder_settings(self, settings: RootFinderSettings) -> "CurveSetUpBuilder":
        if not isinstance(settings, RootFinderSettings):
            raise ConfigurationError(f"Not root finder settings: {settings!r}")
        self._settings = replace(settings)
        return self

    # ------------------------------------------------------------------
    # Hull-White
    # ------------------------------------------------------------------
    def add_hull_white_parameters(self, parameters: HullWhiteParameters) -> "CurveSetUpBuilder":
        self.flavor = self._hull_white_flavor().with_parameters(parameters)
        return self

    def for_hull_white_currency(self, currency: Currency) -> "CurveSetUpBuilder":
        self.flavor = self._hull_white_flavor().with_currency(currency)
        return self

    def _hull_white_flavor(self) -> HullWhiteFlavor:
        if not isinstance(self.flavor, HullWhiteFlavor):
            raise ConfigurationError(f"Hull-White settings do not apply to {self.flavor.name} set-ups")
        return self.flavor

    # ------------------------------------------------------------------
    # Copy / finalize
    # ------------------------------------------------------------------
    def copy(self) -> "CurveSetUpBuilder":
        """Independent copy: no container, FX matrix or bundle is shared."""
        other = CurveSetUpBuilder(self.flavor)
        other._stages = self.stages
        other._simultaneous = self._simultaneous
        other._descriptors = {name: d.copy(owner=other) for name, d in self._descriptors.items()}
        other._nodes = {
            name: None if nodes is None else list(nodes) for name, nodes in self._nodes.items()
        }
        other._preconstructed = [entry.copy(owner=other) for entry in self._preconstructed]
        other._fx_matrix = self._fx_matrix.copy()
        other._known_bundle = None if self._known_bundle is None else self._known_bundle.copy()
        other._settings = replace(self._settings)
        return other

    def finalize(self) -> CurveBuilder:
        """Validate the set-up and freeze it into a ``CurveBuilder``."""
        if not self._stages:
            raise ConfigurationError("No curves configured")
        self._check_completeness()
        self._check_spread_bases()
        self.flavor.validate()

        known_discounting, known_ibor, known_overnight = self._known_curves()
        discounting = {
            name: d.discounting_id for name, d in self._descriptors.items() if d.discounting_id is not None
        }
        ibor = {name: list(d.ibor_indices) for name, d in self._descriptors.items() if d.ibor_indices}
        overnight = {
            name: list(d.overnight_indices) for name, d in self._descriptors.items() if d.overnight_indices
        }
        issuers = {name: list(d.issuers) for name, d in self._descriptors.items() if d.issuers}

        if self._known_bundle is not None:
            missing = [e.name for e in self._preconstructed if e.name not in self._known_bundle]
            if missing:
                logger.warning("Known sensitivity bundle has no entry for pre-constructed curves %s", missing)

        logger.info(
            "Finalized %s set-up: %s stage(s) %s, %s pre-constructed curve(s)",
            self.flavor.name, len(self._stages), self._stages, len(self._preconstructed),
        )
        return CurveBuilder(
            stages=self.stages,
            descriptors={name: d.copy() for name, d in self._descriptors.items()},
            nodes={name: None if nodes is None else list(nodes) for name, nodes in self._nodes.items()},
            discounting=discounting,
            ibor=ibor,
            overnight=overnight,
            issuers=issuers,
            known_discounting=known_discounting,
            known_ibor=known_ibor,
            known_overnight=known_overnight,
            fx_matrix=self._fx_matrix.copy(),
            known_bundle=None if self._known_bundle is None else self._known_bundle.copy(),
            settings=replace(self._settings),
            flavor=self.flavor,
        )

    get_builder = finalize

    def _check_completeness(self) -> None:
        declared = set(self.curve_names)
        problems = []
        node_names = set(self._nodes)
        if declared - node_names:
            problems.append(_describe("Have not added nodes for", declared - node_names))
        if node_names - declared:
            problems.append(
                _describe("Have added nodes for", node_names - declared) + " but they have not been declared"
            )
        descriptor_names = set(self._descriptors)
        if declared - descriptor_names:
            problems.append(_describe("Have not configured curve types for", declared - descriptor_names))
        if descriptor_names - declared:
            problems.append(
                _describe("Have configured curve types for", descriptor_names - declared)
                + " but they have not been declared"
            )
        if problems:
            raise StateError("; ".join(problems))

    def _check_spread_bases(self) -> None:
        """Spread bases must be pre-constructed or built no later than the spread curve."""
        available = {entry.name for entry in self._preconstructed}
        for stage in self._stages:
            bases = {name: self._descriptors[name].base_curve_name for name in stage}
            for name, base in bases.items():
                if base is None or base in available:
                    continue
                if base not in bases:
                    where = (
                        "built in a later stage" if base in self.curve_names
                        else "neither declared nor pre-constructed"
                    )
                    raise ConfigurationError(f"Base curve {base} of spread curve {name} is {where}")
                seen = [name]
                while base in bases and base not in seen:
                    seen.append(base)
                    base = bases[base]
                if base in seen:
                    raise ConfigurationError(f"Spread curves {seen} are built over each other")
            available.update(stage)

    def _known_curves(self):
        discounting: Dict[object, object] = {}
        ibor: Dict[IborIndex, object] = {}
        overnight: Dict[OvernightIndex, object] = {}
        seen = set()
        for entry in self._preconstructed:
            for key in entry.usage_keys():
                if key in seen:
                    raise StateError(f"More than one pre-constructed curve is used for {key}")
                seen.add(key)
            if entry.discounting_id is not None:
                discounting[entry.discounting_id] = entry.curve
            for index in entry.ibor_indices:
                ibor[index] = entry.curve
            for index in entry.overnight_indices:
                overnight[index] = entry.curve
        return discounting, ibor, overnight

    def __repr__(self) -> str:
        return f"CurveSetUpBuilder({self.flavor.name}, stages={self._stages})"
