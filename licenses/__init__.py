"""
Licenses module - bot license management.

This module handles:
- License entity and domain logic
- License key and trial token generation
- License lifecycle (issue, trial, verify, suspend, renew)
- License verification with lazy expiry
"""
