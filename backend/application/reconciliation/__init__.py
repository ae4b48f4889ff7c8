"""Order status / meal selection reconciliation use cases.

Every write to ``daily_statuses`` and ``daily_selections`` goes through a
unit of work opened by one of these handlers (or the order status
commands), so both documents change together or not at all.
"""
