"""
Herald Test Suite
=================

Test Organization
-----------------
- tests/unit/event/    : Event registry, once semantics, re-entrancy, metrics
- tests/unit/config/   : Environment and YAML configuration
- tests/unit/logging/  : Structured logging and log context

Testing Philosophy
------------------
- Fast, isolated unit tests; no external services
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
