"""Outbound services for the NGSI adapter."""
