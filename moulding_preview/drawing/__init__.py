"""Frame geometry engine and its SVG/DXF outputs."""
