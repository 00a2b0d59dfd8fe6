"""Template synchronization engine.

Import from submodules:
- registry: Registry, Preset
- catalog: build_default_registry
- downloader: Downloader, CacheEntry
- extractor: Extractor, ExtractionPlan, ExtractionResult
- diff: compute_diff, collect_files, DiffReport
- tracker: InstalledStateTracker
"""
