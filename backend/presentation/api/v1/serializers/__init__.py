"""
Serializers Package.

API serializers for the PRM system, one module per area.
"""
