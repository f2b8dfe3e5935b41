"""
Catalog Domain - nomenclature, kinds and units of measure.
"""
