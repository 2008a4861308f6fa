# piifilter/service/__init__.py

"""Service layer: settings, the filter chain and span integration."""
