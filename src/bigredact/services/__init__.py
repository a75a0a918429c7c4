"""
BigRedact - Services Package

Non-UI services: image decoding, PDF rasterization and export to disk.
"""
