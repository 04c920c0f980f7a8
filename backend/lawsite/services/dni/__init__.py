"""
DNI (dynamic number insertion) helpers.

- sync: mirror the swapped primary phone number onto the footer
- refresh: ask the WhatConverts script to re-scan the page
"""

from lawsite.services.dni.refresh import PageContext, WhatConvertsRefresher
from lawsite.services.dni.sync import DniPhoneSync, DniSyncHandle, SyncState

__all__ = [
    "DniPhoneSync",
    "DniSyncHandle",
    "SyncState",
    "PageContext",
    "WhatConvertsRefresher",
]
