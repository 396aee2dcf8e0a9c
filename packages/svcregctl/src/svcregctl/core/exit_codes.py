from __future__ import annotations

OK = 0
ERR_CONFIG = 2
ERR_IO = 3
ERR_VALIDATION = 4
ERR_VIOLATION = 16
ERR_INTERNAL = 99
