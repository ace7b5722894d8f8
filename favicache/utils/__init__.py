"""Utilities for favicache"""
