"""Repository helpers over the mirror DB."""
