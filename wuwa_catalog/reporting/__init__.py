"""
wuwa_catalog.reporting — catalog file output.

Modules:
  export — pretty-printed JSON writers for catalog records and run summaries.
"""
