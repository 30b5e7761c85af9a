"""Routing — rule compilation, route builders, group controllers and the registry.

Routes are declared during a load phase and compiled into anchored
patterns once; lookups afterwards only read the registry.
"""
