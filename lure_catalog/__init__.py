"""
Lure Catalog Ingestion Pipeline

Modules:
    models      - Data models (ScrapedProduct, ScrapedColor, Variant)
    common      - Shared utilities (config, settings, REST client, units)
    adapters    - Per-manufacturer source adapters and their registry
    discovery   - Product URL discovery from listing pages
    pipeline    - Variant expansion, image processing and orchestration
    storage     - Relational catalog store and blob store clients
    tracker     - Ingestion tracker (makers and per-product records)
"""
