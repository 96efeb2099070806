"""Console rendering of pipeline results."""
