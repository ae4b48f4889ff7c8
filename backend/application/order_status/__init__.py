"""Daily order status use cases."""
