"""
Docker CE provisioning steps.

This package holds the individual provisioning steps for a CentOS 7 host
and the registry that puts them in execution order.
"""

from installer.registry import build_steps

__all__ = ["build_steps"]
