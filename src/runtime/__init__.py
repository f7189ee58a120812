# path: src/runtime/__init__.py

"""
Runtime wiring package.

- host: the host's priority list of branches
- scheduler: tick loop driving one goal to completion
- settings: config/runtime.yaml
- logging_config / error_handling: ambient plumbing

Submodules are imported explicitly; interaction.behavior depends on
runtime.host while runtime.scheduler depends on interaction.
"""
