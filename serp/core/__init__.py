"""Core types and exceptions shared by fetchers and the resolver"""
