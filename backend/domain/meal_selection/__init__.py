"""Meal selection bounded context.

Per-order record of chosen or chef-assigned meals and skip requests,
one entry per delivery date.
"""
