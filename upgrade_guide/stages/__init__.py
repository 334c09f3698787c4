"""Pipeline stages: range filter, type consolidation, file consolidation, ordering.

Each stage exposes a small, pure function API over lists of ``UpgradeStep``
and never mutates its input; merged steps are always new values.
"""
