import logging
from datetime import date, timedelta

import volcal
from volcal import (
    TARGET,
    Actual365Fixed,
    BatesEngine,
    BatesModel,
    ConstantSwaptionVolatility,
    EndCriteria,
    FlatForward,
    HestonModelHelper,
    HestonProcess,
    LevenbergMarquardt,
    Period,
    ZeroCurve,
)


volcal.configure_logging(logging.INFO, format_string="%(name)s %(levelname)s %(message)s")


# ---------------------------------------------------------------------------
# Swaption surface queries
# ---------------------------------------------------------------------------
surface = ConstantSwaptionVolatility(
    0.20, reference_date=date(2023, 1, 10), calendar=TARGET(), day_counter=Actual365Fixed()
)
print("1Y x 5Y vol:", surface.volatility("1Y", "5Y", 0.03))
print("1Y x 5Y variance:", surface.black_variance(1.0, 5.0, 0.03))
print("max swap length:", surface.max_swap_length())


# ---------------------------------------------------------------------------
# Bates calibration to a DAX implied-volatility surface (5 July 2002)
# ---------------------------------------------------------------------------
settlement = date(2002, 7, 5)
spot = 4468.17
days = [13, 41, 75, 165, 256, 345, 524, 703]
rates = [0.0357, 0.0349, 0.0341, 0.0355, 0.0359, 0.0368, 0.0386, 0.0401]
strikes = [3400, 3600, 3800, 4000, 4200, 4400, 4500, 4600, 4800, 5000, 5200, 5400, 5600]
vols = [
    [0.6625, 0.4875, 0.4204, 0.3667, 0.3431, 0.3267, 0.3121, 0.3121],
    [0.6007, 0.4543, 0.3967, 0.3511, 0.3279, 0.3154, 0.2984, 0.2921],
    [0.5084, 0.4221, 0.3718, 0.3327, 0.3155, 0.3027, 0.2919, 0.2889],
    [0.4541, 0.3869, 0.3492, 0.3149, 0.2963, 0.2926, 0.2819, 0.2800],
    [0.4060, 0.3607, 0.3330, 0.2999, 0.2887, 0.2811, 0.2751, 0.2775],
    [0.3726, 0.3396, 0.3108, 0.2781, 0.2788, 0.2722, 0.2661, 0.2686],
    [0.3550, 0.3277, 0.3012, 0.2781, 0.2781, 0.2661, 0.2661, 0.2681],
    [0.3428, 0.3209, 0.2958, 0.2740, 0.2688, 0.2627, 0.2580, 0.2620],
    [0.3302, 0.3062, 0.2799, 0.2631, 0.2573, 0.2533, 0.2504, 0.2544],
    [0.3343, 0.2959, 0.2705, 0.2540, 0.2504, 0.2464, 0.2448, 0.2462],
    [0.3460, 0.2845, 0.2624, 0.2463, 0.2425, 0.2385, 0.2373, 0.2422],
    [0.3857, 0.2860, 0.2578, 0.2399, 0.2357, 0.2327, 0.2312, 0.2351],
    [0.3976, 0.2860, 0.2607, 0.2356, 0.2297, 0.2268, 0.2241, 0.2320],
]

risk_free = ZeroCurve(
    [settlement] + [settlement + timedelta(days=d) for d in days], [rates[0]] + rates
)
dividend = FlatForward(0.0, reference_date=settlement)

process = HestonProcess(
    spot=spot,
    risk_free=risk_free,
    dividend=dividend,
    v0=0.0433,
    kappa=1.0,
    theta=0.0433,
    sigma=1.0,
    rho=0.0,
)
model = BatesModel(process, lambda_=1.1098, nu=-0.1285, delta=0.1702)
engine = BatesEngine(model, 64)

helpers = []
for strike, row in zip(strikes, vols):
    for d, vol in zip(days, row):
        helper = HestonModelHelper(
            Period((d + 3) // 7, "W"),
            TARGET(),
            spot,
            float(strike),
            vol,
            risk_free,
            dividend,
            error_type="implied_vol",
        )
        helper.set_pricing_engine(engine)
        helpers.append(helper)

print("error before:", model.calibration_error(helpers))
reason = model.calibrate(helpers, LevenbergMarquardt(), EndCriteria(400, 40, 1e-8, 1e-8, 1e-8))
print("reason:", reason)
print("error after:", model.calibration_error(helpers))
print(model.last_calibration.parameters)
