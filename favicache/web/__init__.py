"""Web routers for favicache"""
