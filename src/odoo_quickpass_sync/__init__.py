"""Odoo Quickpass sync: REST middleware over Odoo hr.employee records."""

__version__ = "1.0.0"
