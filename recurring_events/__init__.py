"""
Recurring event model for calendar UIs.

Provides the recurrence rule codec and the occurrence reconciler that turns
edits and drags on a single occurrence into parent exclusions plus override
events.
"""

__version__ = "0.1.0"
