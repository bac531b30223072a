# !/usr/bin/env python3
# filename: install_docker.py
# -*- coding: utf-8 -*-
"""
Entry point for the Docker CE provisioner.

Equivalent to the `docker-provision` console script, for running straight
from a checkout: sudo python3 install_docker.py [options]
"""

import sys

from provisioning.main import main

if __name__ == "__main__":
    sys.exit(main())
