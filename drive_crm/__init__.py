"""Driving school CRM — scheduling, attendance and ledger service."""

__version__ = "0.1.0"
