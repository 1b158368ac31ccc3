"""Application layer: ports and use cases of the structured messaging pipeline."""
