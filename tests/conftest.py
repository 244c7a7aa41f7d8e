"""Shared test setup. Keeps the suite off the network."""

import os

os.environ.setdefault("SHOPBIAS_GEO_ENABLED", "false")
