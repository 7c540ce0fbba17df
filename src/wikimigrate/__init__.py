"""wikimigrate — migrate TiddlyWiki exports into linked Markdown."""

__version__ = "0.1.0"
