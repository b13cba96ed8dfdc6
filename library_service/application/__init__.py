"""
Application layer.

Implements the use cases of the service with CQRS:
- commands change state inside a unit of work
- queries read data and return DTOs
"""
