"""
Billing module - invoices tied to licenses.

This module handles:
- Invoice entity and domain logic
- Invoice issuance
- Invoice payment and the license renewal it triggers
"""
