"""Application level configuration helpers"""
