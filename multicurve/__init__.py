"""Multi-curve interest-rate term structure construction.

This package turns declarative curve set-ups (which curves, in what order,
used for what, anchored by which instruments) into calibrated curve providers
and parameter sensitivities.

Key modules:
- construction: Curve set-up builder, curve type descriptors, calibration plans
- calibration: Calibration units, par-spread calculators, root finders
- curves: Curve objects and curve generators
- provider: Known-data containers and sensitivity bundles
- instruments: Instrument definitions, conversion and node-time calculators
- market: Currencies, indices, legal entities, FX matrix, fixings
- conventions: Day counts, calendars and date arithmetic
- interpolation: One-dimensional interpolators
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Main modules are imported via subpackages
    "construction",
    "calibration",
    "curves",
    "provider",
    "instruments",
    "market",
    "conventions",
    "interpolation",
]
