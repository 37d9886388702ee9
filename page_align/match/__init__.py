"""Page-to-segment matching: normalization, similarity and the sequential engine."""
