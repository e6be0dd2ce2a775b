"""
API routers grouped by functional area.
"""
