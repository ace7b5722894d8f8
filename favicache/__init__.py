"""favicache: favicon resolution and caching service"""
