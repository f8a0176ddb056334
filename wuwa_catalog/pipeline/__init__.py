"""
Catalog pipeline.

Modules:
  entity        — per-entity resolve → fetch → publish → record
  base          — ``CatalogStage`` run contract and shared catalog loop
  roles         — ``RoleCatalogStage``   → roles.json
  weapons       — ``WeaponCatalogStage`` → weapons.json
  orchestrator  — runs the selected catalogs independently of each other
"""
