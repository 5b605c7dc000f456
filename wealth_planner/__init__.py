"""Investment growth projections and saved scenarios."""
