"""
Operator subcommands.
"""
