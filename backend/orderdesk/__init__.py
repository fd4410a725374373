"""orderdesk: data-access layer for customers, orders and shipping zones."""

__version__ = "0.1.0"
