"""
Swatch core: token IR, loading, reference resolution, theme composition,
transforms, filters and the build orchestrator.
"""
