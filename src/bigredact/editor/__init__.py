"""
BigRedact - Editor Package

Core page editing logic: page store, viewport, annotation tool, exporter and
the rendering surface they drive.
"""
