"""Request rate limiting."""
