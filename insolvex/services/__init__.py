"""Services that call external models."""

from .extractor import DocumentExtractor, create_client, load_images, parse_model_response

__all__ = ["DocumentExtractor", "create_client", "load_images", "parse_model_response"]
