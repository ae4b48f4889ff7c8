"""Domain layer for order delivery statuses and meal selections.

Pure business rules, independent of MongoDB, HTTP and the scheduler.
"""
