"""
sabres.observability

Logging helpers shared by every layer.
"""
