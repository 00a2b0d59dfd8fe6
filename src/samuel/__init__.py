"""samuel: keep a project's AI guides, workflows and templates in sync.

Components published in a remote repository are cached per version, applied
to the project under a conflict policy that never silently destroys local
edits, and tracked in samuel.toml. See `samuel --help` for details.
"""
