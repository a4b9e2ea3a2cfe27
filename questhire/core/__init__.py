"""
Core: configuration, database, responses, errors, tenancy
"""
