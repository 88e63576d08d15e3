"""Domain layer — broker resource models, errors, and the broker port.

Pure data and contracts. No HTTP, no CLI.
"""
