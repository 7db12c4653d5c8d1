"""
Role registry feature module.

Roles carry a complete CRUD grid per entity type. System roles are seeded
with fixed ids and cannot be deleted; custom roles are created by operators.
"""
