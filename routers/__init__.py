"""HTTP routers for the NGSI adapter."""
