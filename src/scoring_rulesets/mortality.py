"""Coarse mortality-risk bands keyed by test name.

Each table is a list of ``(upper_bound_exclusive, band)`` pairs checked in
order; a ``None`` bound closes the table and catches every higher score.
"""

from __future__ import annotations

from scoring_rulesets.constants import (
    APACHE_II_NAME,
    APACHE_III_NAME,
    UNKNOWN_RISK_LABEL,
)

MORTALITY_TABLES: dict[str, list[tuple[int | None, str]]] = {
    APACHE_II_NAME: [
        (10, "~15%"),
        (20, "~25%"),
        (30, "~50%"),
        (None, ">80%"),
    ],
    APACHE_III_NAME: [
        (30, "~10%"),
        (45, "~20%"),
        (55, "~30%"),
        (65, "~50%"),
        (75, "~65%"),
        (85, "~75%"),
        (None, ">85%"),
    ],
}


def estimate_mortality_risk(score: int, test_name: str) -> str:
    """Return the risk band for *score* under *test_name*'s table.

    Unrecognised test names yield :data:`UNKNOWN_RISK_LABEL`.
    """
    table = MORTALITY_TABLES.get(test_name)
    if table is None:
        return UNKNOWN_RISK_LABEL
    for bound, band in table:
        if bound is None or score < bound:
            return band
    return UNKNOWN_RISK_LABEL
