from datetime import date

import pytest

from conftest import USD_LIBOR_3M, USD_SOFR, VALUATION_DATE
from multicurve.construction import (
    ContinuousDiscountFactor,
    ContinuousYield,
    CurveSetUpBuilder,
    CurveTypeDescriptor,
    DiscountingFlavor,
    Functional,
    HullWhiteFlavor,
    IssuerFlavor,
    NodeTimePolicy,
    PeriodicYield,
)
from multicurve.conventions import CurveFunction
from multicurve.curves import (
    DiscountFactorGenerator,
    NelsonSiegelGenerator,
    PeriodicYieldGenerator,
    SpreadGenerator,
    YieldGenerator,
)
from multicurve.errors import ConfigurationError, StateError
from multicurve.instruments import InstrumentMaturityCalculator, LastFixingEndTimeCalculator
from multicurve.market import EUR, USD, IborIndex, LegalEntityFilter

USD_LIBOR_6M = IborIndex("USD-LIBOR-6M", USD, "6M")


def _descriptor(flavor=None):
    return CurveTypeDescriptor("CURVE", flavor or DiscountingFlavor())


class TestExclusivity:
    def test_functional_after_interpolator(self):
        descriptor = _descriptor().with_interpolator("LINEAR")
        with pytest.raises(ConfigurationError):
            descriptor.functional_form(CurveFunction.NELSON_SIEGEL)

    def test_interpolator_after_functional(self):
        descriptor = _descriptor().functional_form(CurveFunction.NELSON_SIEGEL)
        with pytest.raises(ConfigurationError):
            descriptor.with_interpolator("LINEAR")

    @pytest.mark.parametrize(
        "first, second",
        [
            ("continuous_interpolation_on_yield", "periodic_interpolation_on_yield"),
            ("continuous_interpolation_on_yield", "continuous_interpolation_on_discount_factors"),
            ("periodic_interpolation_on_yield", "continuous_interpolation_on_yield"),
            ("periodic_interpolation_on_yield", "continuous_interpolation_on_discount_factors"),
            ("continuous_interpolation_on_discount_factors", "continuous_interpolation_on_yield"),
            ("continuous_interpolation_on_discount_factors", "periodic_interpolation_on_yield"),
            ("continuous_interpolation_on_yield", "continuous_interpolation_on_yield"),
        ],
    )
    def test_two_forms_fail_on_second(self, first, second):
        def call(descriptor, method):
            if method == "periodic_interpolation_on_yield":
                return getattr(descriptor, method)(2)
            return getattr(descriptor, method)()

        descriptor = _descriptor().with_interpolator("LINEAR")
        call(descriptor, first)
        with pytest.raises(ConfigurationError):
            call(descriptor, second)

    @pytest.mark.parametrize(
        "setter",
        [
            lambda d: d.with_interpolator("LINEAR"),
            lambda d: d.continuous_interpolation_on_yield(),
            lambda d: d.using_node_dates(date(2024, 6, 1), date(2025, 1, 1)),
            lambda d: d.as_spread_over("BASE"),
        ],
    )
    def test_functional_form_after_any_setting(self, setter):
        descriptor = setter(_descriptor())
        with pytest.raises(ConfigurationError):
            descriptor.functional_form(CurveFunction.NELSON_SIEGEL)

    def test_form_after_functional(self):
        descriptor = _descriptor().functional_form(CurveFunction.NELSON_SIEGEL)
        with pytest.raises(ConfigurationError):
            descriptor.continuous_interpolation_on_yield()
        with pytest.raises(ConfigurationError):
            descriptor.as_spread_over("BASE")
        with pytest.raises(ConfigurationError):
            descriptor.using_node_dates(date(2024, 6, 1), date(2025, 1, 1))

    def test_periodic_and_node_dates(self):
        descriptor = _descriptor().periodic_interpolation_on_yield(4)
        with pytest.raises(ConfigurationError):
            descriptor.using_node_dates(date(2024, 6, 1), date(2025, 1, 1))
        descriptor = _descriptor().using_node_dates(date(2024, 6, 1), date(2025, 1, 1))
        with pytest.raises(ConfigurationError):
            descriptor.periodic_interpolation_on_yield(4)

    @pytest.mark.parametrize("periods", [0, -2, 1.5])
    def test_periodic_needs_positive_count(self, periods):
        with pytest.raises(ConfigurationError):
            _descriptor().periodic_interpolation_on_yield(periods)

    def test_node_time_policy_once(self):
        descriptor = _descriptor().using_last_fixing_end_time()
        with pytest.raises(ConfigurationError):
            descriptor.using_instrument_maturity()
        with pytest.raises(ConfigurationError):
            descriptor.using_last_fixing_end_time()

    def test_unknown_interpolator(self):
        with pytest.raises(ConfigurationError, match="Unknown interpolator"):
            _descriptor().with_interpolator("CUBIC_SPLINE")

    def test_empty_node_dates(self):
        with pytest.raises(ConfigurationError):
            _descriptor().using_node_dates()


class TestUsage:
    def test_plain_flavor_one_index_per_call(self):
        descriptor = _descriptor()
        with pytest.raises(ConfigurationError, match="one index per call"):
            descriptor.for_index(USD_LIBOR_3M, USD_LIBOR_6M)
        descriptor.for_index(USD_LIBOR_3M).for_index(USD_SOFR)
        assert descriptor.ibor_indices == [USD_LIBOR_3M]
        assert descriptor.overnight_indices == [USD_SOFR]

    @pytest.mark.parametrize("flavor", [IssuerFlavor(), HullWhiteFlavor()])
    def test_bond_and_hull_white_accumulate(self, flavor):
        descriptor = _descriptor(flavor)
        descriptor.for_index(USD_LIBOR_3M, USD_SOFR).for_index(USD_LIBOR_6M)
        assert descriptor.ibor_indices == [USD_LIBOR_3M, USD_LIBOR_6M]
        assert descriptor.overnight_indices == [USD_SOFR]

    def test_for_index_rejects_non_index(self):
        with pytest.raises(ConfigurationError):
            _descriptor().for_index("USD-LIBOR-3M")
        with pytest.raises(ConfigurationError):
            _descriptor().for_index()

    def test_for_issuer_one_pair_per_call(self):
        descriptor = _descriptor(IssuerFlavor())
        pair = ("ACME", LegalEntityFilter.SHORT_NAME)
        with pytest.raises(ConfigurationError):
            descriptor.for_issuer(pair, ("US", LegalEntityFilter.REGION))
        descriptor.for_issuer(pair).for_issuer(("US", LegalEntityFilter.REGION))
        assert descriptor.issuers == [pair, ("US", LegalEntityFilter.REGION)]

    def test_for_issuer_only_on_issuer_flavor(self):
        with pytest.raises(ConfigurationError):
            _descriptor().for_issuer(("ACME", LegalEntityFilter.SHORT_NAME))

    def test_for_discounting_none(self):
        with pytest.raises(ConfigurationError):
            _descriptor().for_discounting(None)

    def test_unattached_done(self):
        with pytest.raises(StateError):
            _descriptor().done()


class TestGenerator:
    def test_default_is_floating_yield_by_maturity(self):
        descriptor = _descriptor().with_interpolator("LINEAR")
        generator = descriptor.build_curve_generator(VALUATION_DATE)
        assert isinstance(generator, YieldGenerator)
        assert generator.node_times is None
        assert isinstance(generator.node_time_calculator, InstrumentMaturityCalculator)
        assert descriptor.form is None

    def test_last_fixing_end_policy(self):
        descriptor = _descriptor().with_interpolator("LINEAR").using_last_fixing_end_time()
        assert descriptor.node_time_policy is NodeTimePolicy.LAST_FIXING_END
        generator = descriptor.build_curve_generator(VALUATION_DATE)
        assert isinstance(generator.node_time_calculator, LastFixingEndTimeCalculator)

    def test_periodic(self):
        descriptor = _descriptor().with_interpolator("LINEAR").periodic_interpolation_on_yield(2)
        assert descriptor.form == PeriodicYield(2)
        generator = descriptor.build_curve_generator(VALUATION_DATE)
        assert isinstance(generator, PeriodicYieldGenerator)
        assert generator.periods_per_year == 2

    def test_discount_factors(self):
        descriptor = _descriptor().with_interpolator("LOG_LINEAR").continuous_interpolation_on_discount_factors()
        assert descriptor.form == ContinuousDiscountFactor()
        assert isinstance(descriptor.build_curve_generator(VALUATION_DATE), DiscountFactorGenerator)

    def test_node_dates(self):
        descriptor = (
            _descriptor()
            .with_interpolator("LINEAR")
            .continuous_interpolation_on_yield()
            .using_node_dates(date(2024, 7, 15), date(2025, 1, 15))
        )
        assert descriptor.form == ContinuousYield()
        generator = descriptor.build_curve_generator(VALUATION_DATE)
        assert isinstance(generator, YieldGenerator)
        assert generator.node_times == pytest.approx([182 / 365, 366 / 365])

    def test_node_dates_on_discount_factors(self):
        descriptor = (
            _descriptor()
            .with_interpolator("LINEAR")
            .using_node_dates(date(2024, 7, 15), date(2025, 1, 15))
            .continuous_interpolation_on_discount_factors()
        )
        generator = descriptor.build_curve_generator(VALUATION_DATE)
        assert isinstance(generator, DiscountFactorGenerator)

    def test_single_node_date_fails(self):
        descriptor = _descriptor().with_interpolator("LINEAR").using_node_dates(date(2024, 7, 15))
        with pytest.raises(ConfigurationError, match="two node dates"):
            descriptor.build_curve_generator(VALUATION_DATE)

    def test_requires_interpolator(self):
        with pytest.raises(ConfigurationError):
            _descriptor().build_curve_generator(VALUATION_DATE)
        with pytest.raises(ConfigurationError):
            _descriptor().continuous_interpolation_on_yield().build_curve_generator(VALUATION_DATE)

    def test_nelson_siegel(self):
        descriptor = _descriptor().functional_form(CurveFunction.NELSON_SIEGEL)
        assert descriptor.form == Functional(CurveFunction.NELSON_SIEGEL)
        generator = descriptor.build_curve_generator(VALUATION_DATE)
        assert isinstance(generator, NelsonSiegelGenerator)
        assert generator.number_of_parameters() == 4

    @pytest.mark.parametrize("subtract", [False, True])
    def test_spread_wraps_generator(self, subtract):
        descriptor = _descriptor().with_interpolator("LINEAR").as_spread_over("BASE", subtract=subtract)
        generator = descriptor.build_curve_generator(VALUATION_DATE)
        assert isinstance(generator, SpreadGenerator)
        assert isinstance(generator.generator, YieldGenerator)
        assert generator.base_curve_name == "BASE"
        assert generator.subtract is subtract

    def test_spread_default_adds(self):
        descriptor = _descriptor().with_interpolator("LINEAR").as_spread_over("BASE")
        assert descriptor.subtract_spread is False

    def test_spread_over_itself(self):
        with pytest.raises(ConfigurationError):
            _descriptor().as_spread_over("CURVE")


def test_copy_is_independent():
    setup = CurveSetUpBuilder(IssuerFlavor())
    descriptor = setup.configure("A").for_index(USD_LIBOR_3M).for_discounting(EUR)
    copied = descriptor.copy()
    copied.for_index(USD_SOFR)
    assert descriptor.overnight_indices == []
    assert copied.discounting_id == EUR
    with pytest.raises(StateError):
        copied.done()
