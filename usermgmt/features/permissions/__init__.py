"""
Permission feature module.

Role defaults per entity type, refined by group permission overrides. The
resolver computes a user's effective CRUD set from a state snapshot.
"""
