# piifilter/engine/__init__.py

"""Engine package providing rule matching and strategy rendering.

The matcher decides whether a key/value pair is sensitive; the anonymizer
renders the configured redaction strategy over the matched text.
"""
