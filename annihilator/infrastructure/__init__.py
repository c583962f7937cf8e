"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the application to the outside world (file system, host process,
console) by implementing the interfaces defined in the domain layer.
"""
