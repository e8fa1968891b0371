"""
Media file sanitizer plugin.

Sanitizes the names of new uploads before they are stored, and on
activation renames every existing media file whose name is not yet
sanitized, updating the stored path, string metadata and size variants
to match.
"""
