from datetime import date

import numpy as np
import pytest

from conftest import USD_LIBOR_3M, VALUATION_DATE
from multicurve.calibration import (
    FiniteDifferenceSensitivityCalculator,
    HullWhiteParSpreadCalculator,
    IssuerParSpreadCalculator,
    ParSpreadMarketQuoteCalculator,
)
from multicurve.construction import (
    BuildResult,
    CurveSetUpBuilder,
    ForwardDirectFlavor,
    HullWhiteFlavor,
    IssuerFlavor,
)
from multicurve.curves import SpreadCurve, YieldCurve
from multicurve.errors import StateError, UnsupportedOperationError
from multicurve.instruments import CashDefinition, FixedCouponBondDefinition, InterestRateFutureDefinition
from multicurve.market import EUR, USD, FxMatrix, LegalEntity, LegalEntityFilter
from multicurve.provider import (
    CurveBuildingBlock,
    HullWhiteParameters,
    HullWhiteProvider,
    IssuerProvider,
    MulticurveForwardProvider,
    MulticurveProvider,
    SensitivityBundle,
)

ACME = LegalEntity("ACME", region="US")


def test_two_stage_round_trip(two_stage_setup, solver):
    result = two_stage_setup.finalize().with_solver(solver).build_curves(VALUATION_DATE)

    assert len(solver.calls) == 2
    first, second = solver.calls
    assert first.unit.curve_names == ["USD-DSC"]
    assert second.unit.curve_names == ["USD-3M"]
    assert "USD-DSC" not in first.known_names
    assert "USD-DSC" in second.known_names

    provider, sensitivities = result
    assert isinstance(result, BuildResult)
    assert provider.curve_names == {"USD-DSC", "USD-3M"}
    assert len(provider["USD-DSC"].node_times) == 3
    assert isinstance(provider["USD-3M"], SpreadCurve)
    assert len(provider["USD-3M"].spread.node_times) == 4
    assert sensitivities.curve_names == ["USD-DSC", "USD-3M"]


def test_nodes_sorted_and_seeded(two_stage_setup, solver):
    two_stage_setup.finalize().with_solver(solver).build_curves(VALUATION_DATE)
    deposits, swaps = (call.unit.bundles[0] for call in solver.calls)
    times = [instrument.maturity_time() for instrument in deposits.instruments]
    assert times == sorted(times)
    np.testing.assert_allclose(deposits.initial_guess, [0.0530, 0.0525, 0.0520])
    np.testing.assert_allclose(swaps.initial_guess, [0.0495, 0.0460, 0.0440, 0.0410])
    np.testing.assert_allclose(deposits.generator.node_times, times)


def test_usage_maps_and_calculators(two_stage_setup, solver):
    two_stage_setup.finalize().with_solver(solver).build_curves(VALUATION_DATE)
    call = solver.calls[0]
    assert call.discounting == {"USD-DSC": USD}
    assert call.ibor == {"USD-3M": (USD_LIBOR_3M,)}
    assert call.overnight == {}
    assert call.issuers is None
    assert type(call.calculator) is ParSpreadMarketQuoteCalculator
    assert isinstance(call.sensitivity_calculator, FiniteDifferenceSensitivityCalculator)
    assert type(call.known_data) is MulticurveProvider
    # Calculators are created per stage
    assert solver.calls[0].calculator is not solver.calls[1].calculator


def test_simultaneous_is_one_call(deposits, swaps, solver):
    setup = CurveSetUpBuilder().declare_simultaneous("USD-DSC", "USD-3M")
    setup.configure("USD-DSC").for_discounting(USD).with_interpolator("LINEAR")
    setup.configure("USD-3M").for_index(USD_LIBOR_3M).with_interpolator("LINEAR").as_spread_over("USD-DSC")
    setup.add_nodes("USD-DSC", deposits).add_nodes("USD-3M", swaps)
    provider, _ = setup.finalize().with_solver(solver).build_curves(VALUATION_DATE)
    assert len(solver.calls) == 1
    assert solver.calls[0].unit.sizes == {"USD-DSC": 3, "USD-3M": 4}
    assert provider.curve_names == {"USD-DSC", "USD-3M"}


def test_builder_is_reusable(two_stage_setup, solver, valuation_date):
    builder = two_stage_setup.finalize().with_solver(solver)
    nodes = builder.nodes
    builder.build_curves(valuation_date)
    builder.build_curves(valuation_date.replace(day=16))
    assert len(solver.calls) == 4
    assert builder.nodes == nodes
    later = solver.calls[2].unit.bundles[0].instruments[0]
    earlier = solver.calls[0].unit.bundles[0].instruments[0]
    assert later.maturity_time() < earlier.maturity_time()


def test_known_data_and_bundle_passed_on(two_stage_setup, solver):
    known = YieldCurve.from_nodes("EUR-DSC", "LINEAR", [1.0, 2.0], [0.03, 0.031])
    known_bundle = SensitivityBundle()
    known_bundle.add("EUR-DSC", CurveBuildingBlock.from_sizes({"EUR-DSC": 2}), np.eye(2))
    fx = FxMatrix().add_currency(EUR, USD, 1.08)
    two_stage_setup.use_preconstructed(known).for_discounting(EUR)
    two_stage_setup.add_fx_matrix(fx).with_known_sensitivity_bundle(known_bundle)

    provider, sensitivities = two_stage_setup.finalize().with_solver(solver).build_curves(VALUATION_DATE)
    first = solver.calls[0]
    assert first.known_data.discounting_curve(EUR) is known
    assert first.known_data.fx_matrix == fx
    assert first.known_bundle == known_bundle
    assert sensitivities.curve_names == ["EUR-DSC", "USD-DSC", "USD-3M"]
    assert provider.discounting_curve(EUR) is known


def test_non_currency_discounting_rejected(deposits, solver):
    setup = CurveSetUpBuilder().declare_simultaneous("ACME")
    setup.configure("ACME").for_discounting(ACME).with_interpolator("LINEAR")
    setup.add_nodes("ACME", deposits)
    builder = setup.finalize().with_solver(solver)
    with pytest.raises(UnsupportedOperationError):
        builder.build_curves(VALUATION_DATE)
    assert solver.calls == []


def test_non_currency_preconstructed_rejected(two_stage_setup, solver):
    known = YieldCurve.from_nodes("ACME", "LINEAR", [1.0], [0.06])
    two_stage_setup.use_preconstructed(known).for_discounting(ACME)
    with pytest.raises(UnsupportedOperationError):
        two_stage_setup.finalize().with_solver(solver).build_curves(VALUATION_DATE)


def test_forward_direct_flavor(deposits, solver):
    setup = CurveSetUpBuilder(ForwardDirectFlavor()).declare_simultaneous("USD-3M")
    setup.configure("USD-3M").for_index(USD_LIBOR_3M).with_interpolator("LINEAR")
    setup.add_nodes("USD-3M", deposits)
    setup.finalize().with_solver(solver).build_curves(VALUATION_DATE)
    assert type(solver.calls[0].known_data) is MulticurveForwardProvider


def test_forward_direct_rejects_non_currency(deposits, solver):
    setup = CurveSetUpBuilder(ForwardDirectFlavor()).declare_simultaneous("ACME")
    setup.configure("ACME").for_discounting("ACME").with_interpolator("LINEAR")
    setup.add_nodes("ACME", deposits)
    with pytest.raises(UnsupportedOperationError):
        setup.finalize().with_solver(solver).build_curves(VALUATION_DATE)


def test_issuer_flavor_accepts_issuer_filter(deposits, solver):
    setup = CurveSetUpBuilder(IssuerFlavor()).declare_simultaneous("USD-DSC", "ACME")
    setup.configure("USD-DSC").for_discounting(USD).with_interpolator("LINEAR")
    setup.configure("ACME").for_issuer((ACME.short_name, LegalEntityFilter.SHORT_NAME)).with_interpolator("LINEAR")
    setup.add_nodes("USD-DSC", deposits).add_nodes("ACME", deposits)
    builder = setup.finalize()
    assert builder.issuer_curves == {"ACME": [("ACME", LegalEntityFilter.SHORT_NAME)]}

    builder.with_solver(solver).build_curves(VALUATION_DATE)
    call = solver.calls[0]
    assert call.issuers == {"ACME": (("ACME", LegalEntityFilter.SHORT_NAME),)}
    assert isinstance(call.calculator, IssuerParSpreadCalculator)
    assert type(call.known_data) is IssuerProvider


def test_hull_white_flavor(deposits, solver):
    parameters = HullWhiteParameters(0.01, (0.01,))
    setup = (
        CurveSetUpBuilder(HullWhiteFlavor())
        .declare_simultaneous("USD-DSC")
        .add_hull_white_parameters(parameters)
        .for_hull_white_currency(USD)
    )
    setup.configure("USD-DSC").for_discounting(USD).for_index(USD_LIBOR_3M).with_interpolator("LINEAR")
    setup.add_nodes("USD-DSC", deposits)
    builder = setup.finalize().with_solver(solver)

    builder.build_curves(VALUATION_DATE)
    call = solver.calls[-1]
    assert isinstance(call.calculator, HullWhiteParSpreadCalculator)
    assert isinstance(call.known_data, HullWhiteProvider)
    assert call.known_data.parameters == parameters
    assert call.known_data.currency == USD

    builder.build_curves_without_convexity_adjustment(VALUATION_DATE)
    call = solver.calls[-1]
    assert type(call.calculator) is ParSpreadMarketQuoteCalculator
    assert type(call.known_data) is MulticurveProvider


def test_without_convexity_adjustment_needs_hull_white(two_stage_setup, solver):
    with pytest.raises(UnsupportedOperationError):
        two_stage_setup.finalize().with_solver(solver).build_curves_without_convexity_adjustment(VALUATION_DATE)


def test_accessors_return_copies(two_stage_setup):
    builder = two_stage_setup.finalize()
    builder.nodes["USD-DSC"].clear()
    builder.ibor_curves["USD-3M"].append(None)
    builder.fx_matrix.add_currency(EUR, USD, 1.1)
    assert len(builder.nodes["USD-DSC"]) == 3
    assert builder.ibor_curves == {"USD-3M": [USD_LIBOR_3M]}
    assert len(builder.fx_matrix) == 0
    assert builder.discounting_curves == {"USD-DSC": USD}
    assert builder.stages == [["USD-DSC"], ["USD-3M"]]


def test_finalized_plan_ignores_later_setup_changes(two_stage_setup, deposits, solver):
    builder = two_stage_setup.finalize()
    two_stage_setup.add_node("USD-DSC", deposits[0])
    two_stage_setup.root_finding_maximum_steps(5)
    assert len(builder.nodes["USD-DSC"]) == 3
    assert builder.root_finder_settings.max_steps == 100


def _residuals(builder, provider, calculator):
    instruments = [i for unit in builder.calibration_units(VALUATION_DATE) for i in unit.instruments]
    return np.array([calculator(instrument, provider) for instrument in instruments])


def test_issuer_curve_calibrated_on_bonds():
    bonds = [
        FixedCouponBondDefinition(ACME, USD, date(2024, 1, 15), maturity, 0.05, price)
        for maturity, price in [
            (date(2025, 1, 15), 1.001),
            (date(2026, 1, 15), 1.000),
            (date(2027, 1, 15), 0.998),
        ]
    ]
    setup = CurveSetUpBuilder(IssuerFlavor()).declare_simultaneous("ACME")
    setup.configure("ACME").for_issuer((ACME.short_name, LegalEntityFilter.SHORT_NAME)).with_interpolator("LINEAR")
    setup.add_nodes("ACME", bonds)
    builder = setup.finalize()

    provider, sensitivities = builder.build_curves(VALUATION_DATE)
    assert isinstance(provider, IssuerProvider)
    assert provider.issuer_curve(ACME).name == "ACME"
    np.testing.assert_allclose(_residuals(builder, provider, IssuerParSpreadCalculator()), 0.0, atol=1e-10)
    assert 0.04 < provider.issuer_curve(ACME).zero(2.0) < 0.06
    assert sensitivities.matrix("ACME").shape == (3, 3)


def test_hull_white_convexity_adjustment_lowers_forwards():
    futures = [
        InterestRateFutureDefinition(USD_LIBOR_3M, last_trading, price)
        for last_trading, price in [
            (date(2024, 3, 18), 0.9475),
            (date(2024, 6, 17), 0.9500),
            (date(2024, 9, 16), 0.9525),
            (date(2024, 12, 16), 0.9550),
        ]
    ]
    setup = (
        CurveSetUpBuilder(HullWhiteFlavor())
        .declare_simultaneous("USD-3M")
        .add_hull_white_parameters(HullWhiteParameters(0.03, (0.01,)))
        .for_hull_white_currency(USD)
    )
    setup.configure("USD-3M").for_discounting(USD).for_index(USD_LIBOR_3M).with_interpolator("LINEAR")
    setup.add_node("USD-3M", CashDefinition.from_tenor(USD, VALUATION_DATE, "3M", 0.0530))
    setup.add_nodes("USD-3M", futures)
    builder = setup.finalize()

    adjusted, _ = builder.build_curves(VALUATION_DATE)
    plain, _ = builder.build_curves_without_convexity_adjustment(VALUATION_DATE)
    assert isinstance(adjusted, HullWhiteProvider)
    assert type(plain) is MulticurveProvider
    np.testing.assert_allclose(_residuals(builder, adjusted, HullWhiteParSpreadCalculator()), 0.0, atol=1e-10)
    np.testing.assert_allclose(_residuals(builder, plain, ParSpreadMarketQuoteCalculator()), 0.0, atol=1e-10)

    # Futures rates sit above forwards, so the fitted curve is lower at the back
    assert adjusted["USD-3M"].zero(1.2) < plain["USD-3M"].zero(1.2)
    assert adjusted["USD-3M"].zero(0.25) == pytest.approx(plain["USD-3M"].zero(0.25), abs=1e-4)


def test_duplicate_node_times_rejected(deposits):
    setup = CurveSetUpBuilder().declare_simultaneous("USD-DSC")
    setup.configure("USD-DSC").for_discounting(USD).with_interpolator("LINEAR")
    setup.add_nodes("USD-DSC", deposits).add_node("USD-DSC", deposits[2])
    builder = setup.finalize()
    with pytest.raises(StateError, match="Curve USD-DSC has nodes with the same node time"):
        builder.calibration_units(VALUATION_DATE)
    with pytest.raises(StateError, match="USD-DSC"):
        builder.build_curves(VALUATION_DATE)
