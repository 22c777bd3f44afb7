# Core package - foundational components
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - errors: Application error taxonomy
# - models: User and Memo records
# - storage: Pluggable record stores (JSON file, in-memory)
