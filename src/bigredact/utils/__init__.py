"""
BigRedact - Utils Package

Utility modules for the application: logging, configuration,
internationalization, exceptions and observable values.
"""
