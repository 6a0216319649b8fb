"""Shared Kernel module.

This module contains foundational components that are explicitly shared across
multiple bounded contexts: caller identity, permission evaluation and the
observation context used by domain probes.
"""
