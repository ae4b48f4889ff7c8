"""Legacy backfill and status migration use cases."""
