"""Developer tools for BlazorPack."""
