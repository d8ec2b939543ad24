"""
Utility functions module.

Common utility functions for calendar handling shared across the system.

Date Semantics:
- All dates are naive calendar dates, no time of day and no timezone
- The evaluation date is always passed explicitly through the pipeline
- Wall-clock time is only read at the outer boundary, via ``today()``
"""
