"""Command line interface for actionkit"""
