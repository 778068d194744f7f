"""Housing subsidy calculator: reference-data lookup plus the subsidy formulas."""
