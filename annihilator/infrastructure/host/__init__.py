"""Host Integration.

The host's active-cache slot and the drop-in manifest that marks the file
cache as installed.
Bounded Context: Host Integration
"""
