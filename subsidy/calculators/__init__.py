"""
Subsidy engine: one pure calculator per formula variant.

No I/O, no shared state. Given a resolved RegionRecord and a validated
request, produce a SubsidyResult with the amount and every intermediate.
"""
