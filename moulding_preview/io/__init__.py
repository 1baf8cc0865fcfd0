"""CAD input: unit scales, DXF reading, primitive chaining and conversion."""
