"""
CLI commands for pactverifier.
"""
