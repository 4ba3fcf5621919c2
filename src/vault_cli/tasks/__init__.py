"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskLine, Priority)
- exclusion.py: exclusion-pattern matching for vault paths
- task_parser.py: checkbox-line grammar, tag extraction
- priority.py: tag -> priority bucket classification
- line_sources.py: pluggable (path, line, text) streams (directory walk, grep)
- task_repository.py: listing with filters + in-place toggling
"""
