"""
Entity resolvers — raw upstream record → metadata fields + asset references.

Modules:
  urls     — absolutize / rehost helpers (marker slicing, prefix stripping)
  filters  — skip-list and name-pattern exclusion
  base     — ``EntityResolver`` contract shared by both catalogs
  roles    — role (character) rules; needs the per-role detail endpoint
  weapons  — weapon rules; listing record is enough
"""
