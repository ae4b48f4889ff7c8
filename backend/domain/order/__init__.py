"""Order domain module.

Owns the per-day delivery status of a customer's subscription order:
the status vocabulary, its transition table and the daily status records
embedded in the order document.
"""
