"""Design extraction, markup normalization and component synthesis."""
