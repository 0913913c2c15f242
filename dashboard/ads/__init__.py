"""Ads module — advertising-campaign lifecycle.

Provides the ad request state machine, the per-action field validator,
and the client and service used to commit validated transitions to the
remote ads backend.
"""
