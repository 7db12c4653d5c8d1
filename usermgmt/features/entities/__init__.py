"""
Entity hierarchy feature module.

Entity types are a closed set of resource kinds; entity instances form a tree
(projects, then files/models/designs, then design files and comments).
"""
