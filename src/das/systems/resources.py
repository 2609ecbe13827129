"""
Operational resource utilization.

Each agent resource counter is measured against a category ceiling.
Counters above 80% of the ceiling are flagged as over-allocated, and
counters below 20% as under-utilized.
"""

from ..state.schema import RESOURCE_TYPES, OperationalResources


RESOURCE_CEILINGS: dict[str, int] = {
    "funding": 1_000_000,
    "safe_houses": 50,
    "vehicles": 100,
    "weapons": 500,
    "surveillance": 100,
    "contacts": 100,
    "documentation": 50,
}

OVER_ALLOCATED_ABOVE = 80
UNDER_UTILIZED_BELOW = 20


def utilization(resources: OperationalResources) -> dict[str, dict]:
    """Current, ceiling and percentage for every resource counter."""
    report = {}
    for resource in RESOURCE_TYPES:
        current = getattr(resources, resource)
        ceiling = RESOURCE_CEILINGS[resource]
        report[resource] = {
            "current": current,
            "maximum": ceiling,
            "utilization": f"{round(current / ceiling * 100)}%",
        }
    return report


def redistribution_advice(resources: OperationalResources) -> list[str]:
    advice = []
    for resource in RESOURCE_TYPES:
        percent = getattr(resources, resource) / RESOURCE_CEILINGS[resource] * 100
        if percent > OVER_ALLOCATED_ABOVE:
            advice.append(f"{resource}: Over-allocated ({percent:.0f}%). Consider redistribution.")
        elif percent < UNDER_UTILIZED_BELOW:
            advice.append(f"{resource}: Under-utilized ({percent:.0f}%). Consider reallocation.")
    return advice
