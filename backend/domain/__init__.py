"""
Domain layer - business rules independent of Django.
"""
