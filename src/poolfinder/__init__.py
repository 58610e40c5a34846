"""
Poolfinder

Directory service for public swimming pools: free-swim availability,
near-me search and versioned edits with a local fallback store.

Example:
    Checking availability directly:

    ```python
    from datetime import datetime
    from poolfinder.availability import AvailabilityEngine
    from poolfinder.services import sample_facilities

    engine = AvailabilityEngine()
    for record in sample_facilities():
        print(record.name, engine.is_open(record, datetime.now(), require_still_open_now=True))
    ```
"""

__version__ = "1.0.0"

# Version info tuple
VERSION_INFO = tuple(int(x) for x in __version__.split("."))


def get_version():
    """Get the package version."""
    return __version__
