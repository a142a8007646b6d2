"""Pipeline components.

This package contains the manifest parser, the skip policy, the output
planner and the executors that materialize a plan on disk.
"""
