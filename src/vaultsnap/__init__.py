"""Snapshot and restore of vault directory trees."""
