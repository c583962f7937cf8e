"""Core Application Layer: Orchestrates cache administration use cases.

Connects the domain layer with the infrastructure layer through interfaces.
Contains the command handler and the install/uninstall lifecycle.
"""
