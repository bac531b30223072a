"""
Step modules for the provisioner.

Each module provides a step's action and the read-only probe that tells
whether the step's work is already done.
"""
