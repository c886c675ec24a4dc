"""
Core modules for the AI DevOps Generator.

This package contains the use-case registry, prompt builder, usage
estimation, artifact export and the generation session state machine.
"""
