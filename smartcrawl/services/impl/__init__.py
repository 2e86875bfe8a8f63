"""Service implementations"""
