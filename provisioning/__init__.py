"""
Docker CE provisioner for CentOS 7.

Sequencing, run state, configuration and reporting for a one-shot
provisioning run.
"""

__version__ = "1.0.0"
