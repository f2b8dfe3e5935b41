"""
Project Domain - projects, their products and work stages.
"""
