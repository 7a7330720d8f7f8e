"""
Domain layer - Business entities, models, schemas, enums and the response envelope.
"""

from domain import enums, models, schemas, responses

__all__ = ["enums", "models", "schemas", "responses"]
