"""
Services applicatifs : reconciliation, enrichissement, maintenance.
"""
