"""
dashfs Tree — paths, content store, node store, views, activity and the
FolderService operations built on them.
"""
