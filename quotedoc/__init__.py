"""
quotedoc - Quote to PDF export for the Art Brasil catalog

Packages:
    api/        Flask blueprint with the export endpoint
    forms/      PDF composition and table layout
    core/       Shared settings, formatting, image fetching, and paths
"""
