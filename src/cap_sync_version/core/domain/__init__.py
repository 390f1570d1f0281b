"""Domain models and enums.

Pure data structures (Pydantic v2). The domain does not read files or
print anything.
"""
