"""Tess back office: inventory, point-of-sale, production and payroll."""

__version__ = "0.1.0"
