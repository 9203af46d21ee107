"""
Workspace hooks: git signing gate and per-branch scratch workspaces.

Hook entry points live in hooks/; this package holds the decision logic
so it can be tested without a host runtime.
"""

__version__ = "1.0.0"
