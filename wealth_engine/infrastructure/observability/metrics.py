"""Prometheus metrics for calculator usage, failures and notable outcomes"""

from prometheus_client import Counter, Histogram

# Calculator metrics
calculation_counter = Counter(
    "wealth_engine_calculation_total",
    "Total calculator invocations",
    ["calculation", "outcome"],  # outcome: ok | invalid | error
)

calculation_duration_histogram = Histogram(
    "wealth_engine_calculation_duration_seconds",
    "Time spent inside a calculator",
    ["calculation"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

# Outcome metrics
over_deducted_counter = Counter(
    "wealth_engine_paycheck_over_deducted_total",
    "Paychecks whose deductions and taxes exceeded gross pay",
)

crossover_unreached_counter = Counter(
    "wealth_engine_crossover_unreached_total",
    "Crossover simulations that ended without reaching the crossover point",
)

risk_flag_counter = Counter(
    "wealth_engine_option_risk_flag_total",
    "Option risk classifications by flag",
    ["flag"],  # Safe | Neutral | Risky
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(calculation: str, outcome: str, duration_seconds: float) -> None:
    """Count a calculator call and observe its latency"""
    calculation_counter.labels(calculation=calculation, outcome=outcome).inc()
    calculation_duration_histogram.labels(calculation=calculation).observe(duration_seconds)
