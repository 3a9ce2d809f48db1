"""Headless admin and public screens, driven through ``AdminApiClient``."""
