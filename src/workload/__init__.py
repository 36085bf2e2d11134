"""Workload - prioritized, time-bucketed view of tasks and synced assignments."""
