"""favicache middlewares"""
