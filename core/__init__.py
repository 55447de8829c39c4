"""
Shared kernel for the bot license service.

Holds the pieces every app leans on: value objects, domain events and
the event bus, store error translation, admin authorization, request
middleware and Prometheus metrics.
"""
