"""
Estimate calculators: room geometry, paint gallons, labor / material cost
roll-ups, drywall repair pricing and production-rate (GPP) estimates.

Everything in this package is pure arithmetic; nothing here touches the
database.
"""
