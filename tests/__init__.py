"""
patternenforcer test suite
==========================

Test Modules
------------
- test_models.py: Enforcement configuration models and persistence
- test_findings.py: Result types and file discovery
- test_naming.py, test_documents.py, test_docstyle.py, test_imports.py,
  test_logs.py, test_rootfiles.py, test_configfiles.py: The checks
- test_enforcer.py, test_metrics.py: Orchestration and metrics
- test_generator.py: Component and feature scaffolding
- test_hooks.py: git and editor hooks
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=src/patternenforcer

    # Skip tests that need git
    pytest -m "not integration"
"""
