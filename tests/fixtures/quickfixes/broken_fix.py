"""Plugin module failing at import time."""

raise RuntimeError("broken on purpose")
