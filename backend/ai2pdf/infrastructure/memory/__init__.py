from .in_memory_conversion_job_repository import InMemoryConversionJobRepository

__all__ = ["InMemoryConversionJobRepository"]
