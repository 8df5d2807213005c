"""Quote PDF composition.

Key exports:
    compose_quote()  - Render line items + client info into PDF bytes
    export_quote()   - Render and save the PDF under the output directory
    draw_table()     - Paginated row table with a per-cell draw hook
"""
