"""Quick fixes bundled with the checker overlay.

Each fix lives in a module named after its class in snake case so that
:class:`a11y_overlay.core.quickfix.QuickFixLoader` can find it by name.
"""
