"""
Service layer abstraction.

Each service encapsulates the logic for a domain: it converts
validated request schemas into store calls, logs every mutation and
converts store entities back into read schemas.  API handlers never
touch store entities directly.
"""
