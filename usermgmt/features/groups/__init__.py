"""
User group feature module.

Groups hold members and are the anchor for permission overrides.
"""
