from datetime import date
from types import SimpleNamespace

import numpy as np
import pytest

from multicurve.construction import CurveSetUpBuilder
from multicurve.instruments import CashDefinition, SwapFixedIborDefinition
from multicurve.market import USD, IborIndex, OvernightIndex
from multicurve.provider import CurveBuildingBlock, SensitivityBundle

VALUATION_DATE = date(2024, 1, 15)

USD_LIBOR_3M = IborIndex("USD-LIBOR-3M", USD, "3M")
USD_SOFR = OvernightIndex("USD-SOFR", USD)


class RecordingSolver:
    """Solver stand-in: keeps the initial guesses and records every call."""

    def __init__(self):
        self.calls = []

    def calibrate(
        self,
        unit,
        known_data,
        known_bundle,
        discounting,
        ibor,
        overnight,
        calculator,
        sensitivity_calculator,
        issuers=None,
    ):
        self.calls.append(
            SimpleNamespace(
                unit=unit,
                known_names=set(known_data.curve_names),
                known_data=known_data,
                known_bundle=known_bundle,
                discounting=discounting,
                ibor=ibor,
                overnight=overnight,
                calculator=calculator,
                sensitivity_calculator=sensitivity_calculator,
                issuers=issuers,
            )
        )
        provider = known_data.copy()
        for bundle in unit.bundles:
            curve = bundle.generator.generate_curve(bundle.curve_name, bundle.initial_guess, provider)
            provider.set_curve(bundle.curve_name, curve)
        result = known_bundle.copy() if known_bundle is not None else SensitivityBundle()
        block = CurveBuildingBlock.from_sizes(unit.sizes)
        for name, size in unit.sizes.items():
            result.add(name, block, np.eye(size))
        return provider, result


@pytest.fixture
def valuation_date():
    return VALUATION_DATE


@pytest.fixture
def solver():
    return RecordingSolver()


@pytest.fixture
def deposits():
    return [
        CashDefinition.from_tenor(USD, VALUATION_DATE, tenor, rate)
        for tenor, rate in [("6M", 0.0520), ("1M", 0.0530), ("3M", 0.0525)]
    ]


@pytest.fixture
def swaps():
    return [
        SwapFixedIborDefinition.from_tenor(USD_LIBOR_3M, VALUATION_DATE, tenor, rate)
        for tenor, rate in [("2Y", 0.0460), ("1Y", 0.0495), ("5Y", 0.0410), ("3Y", 0.0440)]
    ]


@pytest.fixture
def two_stage_setup(deposits, swaps):
    setup = (
        CurveSetUpBuilder()
        .declare_first_stage("USD-DSC")
        .declare_next_stage("USD-3M")
        .configure("USD-DSC")
        .for_discounting(USD)
        .with_interpolator("LINEAR")
        .continuous_interpolation_on_yield()
        .using_instrument_maturity()
        .done()
        .configure("USD-3M")
        .for_index(USD_LIBOR_3M)
        .with_interpolator("LINEAR")
        .as_spread_over("USD-DSC")
        .done()
    )
    setup.add_nodes("USD-DSC", deposits)
    setup.add_nodes("USD-3M", swaps)
    return setup
