"""
Pydantic schema definitions for API payloads.

Each domain (clients, programs, enrollments) defines its own Pydantic
models for request and response bodies.  Schemas are separated from
the store entities to decouple API representation from persistence.
"""
